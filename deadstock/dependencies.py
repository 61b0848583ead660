from typing import Optional

from fastapi import Depends, Header, Request

from deadstock.core.constants import DEFAULT_SESSION_KEY, SESSION_KEY_HEADER
from deadstock.database.session import SessionLocal
from deadstock.services.session_service import SessionStore, load_session_context
from deadstock.services.store_client import StoreClient
from deadstock.services.webhook_service import WebhookClient


def get_store_client() -> StoreClient:
    return StoreClient.from_settings()


def get_webhook_client() -> WebhookClient:
    return WebhookClient()


def get_session_store() -> SessionStore:
    return SessionStore(SessionLocal)


def get_session_key(
    session_key: Optional[str] = Header(None, alias=SESSION_KEY_HEADER),
) -> str:
    value = (session_key or "").strip()
    return value or DEFAULT_SESSION_KEY


def get_session_context(
    session_key: str = Depends(get_session_key),
    store: SessionStore = Depends(get_session_store),
):
    return load_session_context(store, session_key)


def get_view_registry(request: Request):
    return request.app.state.views


__all__ = [
    "get_session_context",
    "get_session_key",
    "get_session_store",
    "get_store_client",
    "get_view_registry",
    "get_webhook_client",
]
