import io
import zipfile
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from openpyxl.utils.exceptions import InvalidFileException

from deadstock.dependencies import (
    get_session_context,
    get_store_client,
    get_view_registry,
    get_webhook_client,
)
from deadstock.schemas.submission import OfferSubmission
from deadstock.services.bulk_upload_service import import_offers
from deadstock.services.offer_service import OffersView
from deadstock.services.webhook_service import WebhookError

router = APIRouter(prefix="/offers", tags=["Offers"])


def _view(views, context):
    return views.get(context.session_key, OffersView.name, OffersView)


def _offers_response(view):
    if view.state.error:
        raise HTTPException(status_code=502, detail=view.state.error)
    return {"offers": view.flagged()}


@router.get("")
def list_offers(
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    view.refresh(store, context)
    return _offers_response(view)


@router.post("", status_code=201)
def add_offer(
    submission: OfferSubmission,
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    if view.state.loaded_at is None:
        view.refresh(store, context)

    try:
        result = view.submit(
            store,
            webhook,
            context,
            submission,
            confirm_duplicate=submission.confirm_duplicate,
        )
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc

    if result.is_rejected:
        raise HTTPException(
            status_code=422,
            detail={"status": result.status.value, "reasons": result.reasons},
        )
    if result.needs_confirmation and not submission.confirm_duplicate:
        raise HTTPException(
            status_code=409,
            detail={"status": result.status.value, "reasons": result.reasons},
        )
    response = _offers_response(view)
    response["status"] = result.status.value
    return response


@router.delete("/{offer_id}")
def delete_offer(
    offer_id: str,
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    view = _view(views, context)
    try:
        view.delete(store, webhook, context, offer_id)
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    return _offers_response(view)


@router.post("/bulk")
def bulk_upload_offers(
    file: UploadFile = File(...),
    sheet: Optional[str] = Form(None),
    allow_duplicates: bool = Form(False),
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    filename = (file.filename or "").lower()
    if not filename.endswith(".xlsx"):
        raise HTTPException(status_code=400, detail="Unsupported file type, upload an .xlsx workbook")
    raw = file.file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file")

    view = _view(views, context)
    try:
        report = import_offers(
            io.BytesIO(raw),
            view,
            store,
            webhook,
            context,
            sheet=sheet,
            allow_duplicates=allow_duplicates,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise HTTPException(status_code=400, detail="invalid_workbook") from exc
    return {"summary": report.summary(), "rows": report.outcomes}


__all__ = ["router"]
