import logging

from deadstock.core.constants import SOLD_STATUS
from deadstock.core.field_labels import OFFER_LABELS, REQUEST_LABELS, label
from deadstock.schemas.activity import DashboardStats
from deadstock.services.activity_service import aggregate_activity, total_offers_value
from deadstock.services.record_normalizer import normalize_offers, normalize_requests
from deadstock.services.store_client import StoreError
from deadstock.services.view_state import FetchingView

logger = logging.getLogger(__name__)


def count_sold_offers(store, table, pharmacy_id):
    try:
        result = (
            store.table(table)
            .select("*", count="exact", head=True)
            .eq(label(OFFER_LABELS, "pharmacy_id"), pharmacy_id)
            .eq(label(OFFER_LABELS, "status"), SOLD_STATUS)
            .execute()
        )
    except StoreError as exc:
        logger.warning("Sold items count unavailable: %s", exc)
        return 0
    return result.count or 0


class DashboardView(FetchingView):
    name = "dashboard"

    def empty(self):
        return DashboardStats()

    def fetch(self, store, context):
        pharmacy_id = context.require_pharmacy_id()
        settings = self._settings

        logger.info("Fetching from %s...", settings.OFFERS_TABLE)
        offers_result = (
            store.table(settings.OFFERS_TABLE)
            .select("*", count="exact")
            .eq(label(OFFER_LABELS, "pharmacy_id"), pharmacy_id)
            .execute()
        )
        logger.info("Fetching from %s...", settings.REQUESTS_TABLE)
        requests_result = (
            store.table(settings.REQUESTS_TABLE)
            .select("*", count="exact")
            .eq(label(REQUEST_LABELS, "pharmacy_id"), pharmacy_id)
            .execute()
        )

        offers = normalize_offers(offers_result.rows)
        requests = normalize_requests(requests_result.rows)
        return DashboardStats(
            total_offers=offers_result.count or 0,
            total_requests=requests_result.count or 0,
            total_offers_value=total_offers_value(offers),
            sold_items=count_sold_offers(store, settings.OFFERS_TABLE, pharmacy_id),
            recent_activity=aggregate_activity(
                offers, requests, limit=settings.ACTIVITY_FEED_LIMIT
            ),
        )
