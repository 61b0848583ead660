"""Per-browser-context session values, passed around as ``SessionContext``.

Holds the same three keys the screens used to read from ambient storage:
``pharmacy_id``, ``pharmacy_profile`` and ``temp_pharmacy_id``.
"""
import json
import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import delete, select

from deadstock.core.constants import (
    SESSION_PHARMACY_ID,
    SESSION_PHARMACY_PROFILE,
    SESSION_TEMP_PHARMACY_ID,
)
from deadstock.models.session_entry import SessionEntry
from deadstock.schemas.pharmacy import PharmacyProfile

logger = logging.getLogger(__name__)


class MissingSessionError(RuntimeError):
    pass


def _parse_pharmacy_id(value):
    if value is None:
        return None
    try:
        pharmacy_id = int(str(value).strip())
    except ValueError:
        logger.warning("Ignoring non-numeric pharmacy id in session: %r", value)
        return None
    return pharmacy_id or None


class SessionStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, session_key, key):
        with self._session_factory() as db:
            entry = db.execute(
                select(SessionEntry).where(
                    SessionEntry.session_key == session_key,
                    SessionEntry.key == key,
                )
            ).scalars().first()
            return entry.value if entry else None

    def set(self, session_key, key, value):
        with self._session_factory() as db:
            entry = db.execute(
                select(SessionEntry).where(
                    SessionEntry.session_key == session_key,
                    SessionEntry.key == key,
                )
            ).scalars().first()
            if entry:
                entry.value = value
            else:
                db.add(SessionEntry(session_key=session_key, key=key, value=value))
            db.commit()

    def delete(self, session_key, key):
        with self._session_factory() as db:
            db.execute(
                delete(SessionEntry).where(
                    SessionEntry.session_key == session_key,
                    SessionEntry.key == key,
                )
            )
            db.commit()

    def clear(self, session_key):
        with self._session_factory() as db:
            db.execute(delete(SessionEntry).where(SessionEntry.session_key == session_key))
            db.commit()

    def items(self, session_key):
        with self._session_factory() as db:
            entries = db.execute(
                select(SessionEntry).where(SessionEntry.session_key == session_key)
            ).scalars().all()
            return {entry.key: entry.value for entry in entries}


@dataclass
class SessionContext:
    session_key: str
    pharmacy_id: Optional[int] = None
    profile: Optional[PharmacyProfile] = None
    temp_pharmacy_id: Optional[int] = None

    @property
    def city(self) -> str:
        return self.profile.city if self.profile else ""

    def require_pharmacy_id(self) -> int:
        if not self.pharmacy_id:
            raise MissingSessionError("Pharmacy profile is not complete")
        return self.pharmacy_id


def load_session_context(store, session_key):
    values = store.items(session_key)
    profile = None
    raw_profile = values.get(SESSION_PHARMACY_PROFILE)
    if raw_profile:
        try:
            profile = PharmacyProfile.model_validate(json.loads(raw_profile))
        except (ValueError, ValidationError):
            logger.warning("Ignoring unreadable pharmacy profile for session %s", session_key)
    return SessionContext(
        session_key=session_key,
        pharmacy_id=_parse_pharmacy_id(values.get(SESSION_PHARMACY_ID)),
        profile=profile,
        temp_pharmacy_id=_parse_pharmacy_id(values.get(SESSION_TEMP_PHARMACY_ID)),
    )


def save_temp_pharmacy_id(store, context, pharmacy_id):
    store.set(context.session_key, SESSION_TEMP_PHARMACY_ID, str(pharmacy_id))
    context.temp_pharmacy_id = pharmacy_id


def save_profile(store, context, profile):
    store.set(context.session_key, SESSION_PHARMACY_PROFILE, profile.model_dump_json())
    context.profile = profile


def promote_pharmacy(store, context, pharmacy_id, profile):
    store.set(context.session_key, SESSION_PHARMACY_ID, str(pharmacy_id))
    save_profile(store, context, profile)
    store.delete(context.session_key, SESSION_TEMP_PHARMACY_ID)
    context.pharmacy_id = pharmacy_id
    context.temp_pharmacy_id = None


__all__ = [
    "MissingSessionError",
    "SessionContext",
    "SessionStore",
    "load_session_context",
    "promote_pharmacy",
    "save_profile",
    "save_temp_pharmacy_id",
]
