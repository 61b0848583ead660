"""Two-phase pharmacy registration and profile updates.

Phase 1 creates credentials under a freshly generated numeric pharmacy id
and parks that id in the session as ``temp_pharmacy_id``. Phase 2 attaches
the profile and only then promotes the id to ``pharmacy_id``.
"""
import logging
import secrets
import time

from deadstock.schemas.pharmacy import PharmacyProfile
from deadstock.services.session_service import (
    MissingSessionError,
    promote_pharmacy,
    save_profile,
    save_temp_pharmacy_id,
)
from deadstock.services.submission_validator import digits_value
from deadstock.services.webhook_service import WebhookError

logger = logging.getLogger(__name__)

_ID_SUFFIX_SPACE = 10**6
_DUPLICATE_MARKERS = ("already registered", "duplicate")


class DuplicateRegistrationError(WebhookError):
    pass


def generate_pharmacy_id(now=None):
    """Seconds since the epoch followed by six random digits."""
    seconds = int(time.time() if now is None else now)
    return seconds * _ID_SUFFIX_SPACE + secrets.randbelow(_ID_SUFFIX_SPACE)


def _is_duplicate_registration(exc):
    if exc.status_code == 409:
        return True
    body = (exc.body or "").lower()
    return any(marker in body for marker in _DUPLICATE_MARKERS)


def build_profile_payload(fields, pharmacy_id, email=None):
    payload = fields.model_dump()
    payload.update(
        pharmacy_id=pharmacy_id,
        phone=digits_value(fields.phone),
        license_no=digits_value(fields.license_no),
        telegram_id=digits_value(fields.telegram_id),
    )
    if email is not None:
        payload["email"] = email
    return payload


def _profile_from_fields(fields, pharmacy_id, email=""):
    values = fields.model_dump(exclude={"email"})
    return PharmacyProfile(id=str(pharmacy_id), email=email or "", **values)


def register_credentials(webhook, store, context, credentials, now=None):
    pharmacy_id = generate_pharmacy_id(now)
    payload = {
        "email": credentials.email,
        "password": credentials.password,
        "pharmacy_id": pharmacy_id,
    }
    try:
        webhook.post_payload(webhook.register_url, payload)
    except WebhookError as exc:
        if _is_duplicate_registration(exc):
            raise DuplicateRegistrationError(
                "This email is already registered",
                status_code=exc.status_code,
                body=exc.body,
            ) from exc
        logger.warning("Registration failed: %s", exc)
        raise

    save_temp_pharmacy_id(store, context, pharmacy_id)
    logger.info("Registered credentials for pharmacy %s", pharmacy_id)
    return pharmacy_id


def complete_profile(webhook, store, context, completion):
    pharmacy_id = context.temp_pharmacy_id
    if not pharmacy_id:
        raise MissingSessionError("Registration has not been started")

    payload = build_profile_payload(completion, pharmacy_id, email=completion.email)
    payload.pop("profile_pic", None)
    try:
        webhook.post_payload(webhook.profile_url, payload)
    except WebhookError as exc:
        logger.warning("Profile save failed: %s", exc)
        raise

    profile = _profile_from_fields(completion, pharmacy_id, completion.email)
    promote_pharmacy(store, context, pharmacy_id, profile)
    return profile


def update_profile(webhook, store, context, fields):
    pharmacy_id = context.require_pharmacy_id()
    payload = build_profile_payload(fields, pharmacy_id)
    try:
        webhook.post_payload(webhook.profile_url, payload)
    except WebhookError as exc:
        logger.warning("Profile update failed: %s", exc)
        raise

    email = context.profile.email if context.profile else ""
    profile = _profile_from_fields(fields, pharmacy_id, email)
    save_profile(store, context, profile)
    return profile
