from fastapi import APIRouter, Depends, HTTPException

from deadstock.dependencies import (
    get_session_context,
    get_session_store,
    get_view_registry,
    get_webhook_client,
)
from deadstock.schemas.pharmacy import Credentials, ProfileCompletion, ProfileFields
from deadstock.services.registration_service import (
    DuplicateRegistrationError,
    complete_profile,
    register_credentials,
    update_profile,
)
from deadstock.services.session_service import MissingSessionError
from deadstock.services.webhook_service import WebhookError

router = APIRouter(tags=["Registration"])


@router.post("/register", status_code=201)
def register(
    credentials: Credentials,
    context=Depends(get_session_context),
    session_store=Depends(get_session_store),
    webhook=Depends(get_webhook_client),
):
    try:
        pharmacy_id = register_credentials(webhook, session_store, context, credentials)
    except DuplicateRegistrationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    return {"pharmacy_id": pharmacy_id, "step": 2}


@router.post("/register/profile")
def register_profile(
    completion: ProfileCompletion,
    context=Depends(get_session_context),
    session_store=Depends(get_session_store),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    try:
        profile = complete_profile(webhook, session_store, context, completion)
    except MissingSessionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    # Cached views were built for the anonymous session.
    views.teardown(context.session_key)
    return {"pharmacy_id": context.pharmacy_id, "profile": profile}


@router.get("/profile")
def read_profile(context=Depends(get_session_context)):
    return {
        "pharmacy_id": context.pharmacy_id,
        "profile": context.profile,
        "complete": bool(context.pharmacy_id),
    }


@router.put("/profile")
def save_profile(
    fields: ProfileFields,
    context=Depends(get_session_context),
    session_store=Depends(get_session_store),
    webhook=Depends(get_webhook_client),
    views=Depends(get_view_registry),
):
    try:
        profile = update_profile(webhook, session_store, context, fields)
    except WebhookError as exc:
        raise HTTPException(status_code=502, detail="error_generic") from exc
    # The marketplace ranking depends on the profile city.
    views.teardown(context.session_key)
    return {"pharmacy_id": context.pharmacy_id, "profile": profile}


@router.post("/logout")
def logout(
    context=Depends(get_session_context),
    session_store=Depends(get_session_store),
    views=Depends(get_view_registry),
):
    session_store.clear(context.session_key)
    closed = views.teardown(context.session_key)
    return {"status": "logged_out", "closed_views": closed}


__all__ = ["router"]
