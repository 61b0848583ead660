import logging
from datetime import datetime, timezone

from deadstock.core.expiry_rules import NEAR_EXPIRY_DAYS, is_near_expiry
from deadstock.core.field_labels import OFFER_LABELS, label
from deadstock.schemas.offer import OfferRead
from deadstock.services.record_normalizer import normalize_offers
from deadstock.services.submission_validator import validate_offer_submission
from deadstock.services.view_state import FetchingView
from deadstock.services.webhook_service import WebhookError

logger = logging.getLogger(__name__)


def with_expiry_flags(offers, now=None, window_days=NEAR_EXPIRY_DAYS):
    now = now or datetime.now(timezone.utc)
    return [
        OfferRead(
            **offer.model_dump(),
            near_expiry=is_near_expiry(offer.expiry_date, now, window_days),
        )
        for offer in offers
    ]


class OffersView(FetchingView):
    """The signed-in pharmacy's own offers, soonest expiry first."""

    name = "offers"

    def fetch(self, store, context):
        pharmacy_id = context.require_pharmacy_id()
        logger.info("Fetching from %s...", self._settings.OFFERS_TABLE)
        result = (
            store.table(self._settings.OFFERS_TABLE)
            .select("*")
            .eq(label(OFFER_LABELS, "pharmacy_id"), pharmacy_id)
            .order(label(OFFER_LABELS, "expiry_date"), ascending=True)
            .execute()
        )
        return normalize_offers(result.rows)

    def flagged(self, now=None):
        return with_expiry_flags(self.state.data, now, self._settings.NEAR_EXPIRY_DAYS)

    def submit(self, store, webhook, context, draft, confirm_duplicate=False):
        """Validate ``draft`` and send it; returns the ``ValidationResult``.

        Nothing is sent when the draft is rejected, or when it duplicates an
        existing (barcode, expiry) pair and ``confirm_duplicate`` is False.
        """
        pharmacy_id = context.require_pharmacy_id()
        result = validate_offer_submission(draft, pharmacy_id, self.state.data)
        if result.is_rejected:
            return result
        if result.needs_confirmation and not confirm_duplicate:
            logger.info("Offer for barcode %s needs duplicate confirmation", draft.drug.barcode)
            return result

        try:
            webhook.post_payload(webhook.offer_url, result.payload)
        except WebhookError as exc:
            logger.warning("Add offer failed: %s", exc)
            raise
        self.refresh(store, context)
        return result

    def delete(self, store, webhook, context, offer_id):
        context.require_pharmacy_id()
        try:
            webhook.delete_record(webhook.offer_url, offer_id)
        except WebhookError as exc:
            logger.warning("Delete offer %s failed: %s", offer_id, exc)
            raise
        self.refresh(store, context)
