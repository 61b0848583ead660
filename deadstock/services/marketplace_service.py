import logging

from deadstock.core.proximity import rank_by_proximity
from deadstock.services.filter_engine import filter_offers
from deadstock.services.record_normalizer import normalize_offers
from deadstock.services.view_state import FetchingView

logger = logging.getLogger(__name__)


class MarketplaceView(FetchingView):
    """Every pharmacy's offers, ranked by distance from the viewer's city."""

    name = "marketplace"
    requires_pharmacy = False

    def fetch(self, store, context):
        logger.info("Fetching from %s...", self._settings.OFFERS_TABLE)
        result = (
            store.table(self._settings.OFFERS_TABLE)
            .select("*")
            .order("created_at", ascending=False)
            .execute()
        )
        return rank_by_proximity(normalize_offers(result.rows), context.city)

    @property
    def ranked(self):
        return list(self.state.data)

    def visible(self, criteria=None):
        return filter_offers(self.state.data, criteria)
