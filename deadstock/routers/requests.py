from fastapi import APIRouter, Depends, HTTPException

from deadstock.dependencies import (
    get_session_context,
    get_store_client,
    get_view_registry,
    get_webhook_client,
)
from deadstock.schemas.submission import RequestDraft
from deadstock.services.request_service import RequestsView
from deadstock.services.webhook_service import WebhookError

router = APIRouter(prefix="/requests", tags=["Requests"])


def _view(views, context):
    return views.get(context.session_key, RequestsView.name, RequestsView)


def _requests_response(view):
    if view.state.error:
        raise HTTPException(status_code=502, detail=view.state.error)
    return {"requests": view.state.data}


@router.get("")
def list_requests(
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    view.refresh(store, context)
    return _requests_response(view)


@router.post("", status_code=201)
def add_request(
    draft: RequestDraft,
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    try:
        result = view.submit(store, webhook, context, draft)
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    if result.is_rejected:
        raise HTTPException(
            status_code=422,
            detail={"status": result.status.value, "reasons": result.reasons},
        )
    response = _requests_response(view)
    response["status"] = result.status.value
    return response


@router.delete("/{request_id}")
def delete_request(
    request_id: str,
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    try:
        view.delete(store, webhook, context, request_id)
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    return _requests_response(view)


__all__ = ["router"]
