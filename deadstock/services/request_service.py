import logging

from deadstock.core.field_labels import REQUEST_LABELS, label
from deadstock.services.record_normalizer import normalize_requests
from deadstock.services.submission_validator import validate_request_submission
from deadstock.services.view_state import FetchingView
from deadstock.services.webhook_service import WebhookError

logger = logging.getLogger(__name__)


class RequestsView(FetchingView):
    name = "requests"

    def fetch(self, store, context):
        pharmacy_id = context.require_pharmacy_id()
        logger.info("Fetching from %s...", self._settings.REQUESTS_TABLE)
        result = (
            store.table(self._settings.REQUESTS_TABLE)
            .select("*")
            .eq(label(REQUEST_LABELS, "pharmacy_id"), pharmacy_id)
            .order("created_at", ascending=False)
            .execute()
        )
        return normalize_requests(result.rows)

    def submit(self, store, webhook, context, draft):
        pharmacy_id = context.require_pharmacy_id()
        result = validate_request_submission(draft, pharmacy_id)
        if result.is_rejected:
            return result
        try:
            webhook.post_payload(webhook.request_url, result.payload)
        except WebhookError as exc:
            logger.warning("Add request failed: %s", exc)
            raise
        self.refresh(store, context)
        return result

    def delete(self, store, webhook, context, request_id):
        context.require_pharmacy_id()
        try:
            webhook.delete_record(webhook.request_url, request_id)
        except WebhookError as exc:
            logger.warning("Delete request %s failed: %s", request_id, exc)
            raise
        self.refresh(store, context)
