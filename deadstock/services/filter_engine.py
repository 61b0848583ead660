from deadstock.schemas.offer import OfferFilter


def _matches_query(offer, query):
    needle = query.lower()
    return (
        needle in (offer.name_en or "").lower()
        or needle in (offer.name_ar or "")
        or needle in (offer.barcode or "")
    )


def filter_offers(offers, criteria=None):
    """Apply text, city and minimum-discount predicates to ranked offers.

    Always returns a new list; the ranked input is never modified, so
    clearing every filter gives the ranked set back in the same order.
    """
    if criteria is None:
        criteria = OfferFilter()
    query = criteria.query or ""
    city = criteria.city or ""
    min_discount = criteria.min_discount or 0

    result = list(offers)
    if query:
        result = [offer for offer in result if _matches_query(offer, query)]
    if city:
        result = [offer for offer in result if offer.city == city]
    if min_discount > 0:
        result = [offer for offer in result if offer.discount >= min_discount]
    return result


__all__ = ["filter_offers"]
