from datetime import datetime, timezone

from deadstock.schemas.activity import ActivityItem

ACTIVITY_FEED_LIMIT = 5

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _timestamp(item):
    return item.created_at or _OLDEST


def aggregate_activity(offers, requests, limit=ACTIVITY_FEED_LIMIT):
    """Merge one pharmacy's offers and requests into a newest-first feed.

    Offers are listed before requests and the sort is stable, so records
    sharing a timestamp keep that input order.
    """
    items = [ActivityItem(kind="offer", record=offer) for offer in offers]
    items.extend(ActivityItem(kind="request", record=request) for request in requests)
    items.sort(key=_timestamp, reverse=True)
    return items[: max(0, limit)]


def total_offers_value(offers):
    return sum(offer.price * offer.quantity for offer in offers)


__all__ = ["ACTIVITY_FEED_LIMIT", "aggregate_activity", "total_offers_value"]
