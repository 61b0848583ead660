import logging

from deadstock.config import get_settings
from deadstock.core.field_labels import CATALOG_LABELS, label
from deadstock.services.record_normalizer import normalize_drug, normalize_drugs
from deadstock.services.store_client import like_pattern

logger = logging.getLogger(__name__)


def search_drugs(store, term, settings=None):
    """Catalog lookup by English or Arabic name; short terms skip the query."""
    settings = settings or get_settings()
    term = (term or "").strip()
    if len(term) < settings.DRUG_SEARCH_MIN_CHARS:
        return []

    result = (
        store.table(settings.CATALOG_TABLE)
        .select("*")
        .or_(
            [
                (label(CATALOG_LABELS, "name_ar"), "ilike", like_pattern(term)),
                (label(CATALOG_LABELS, "name_en"), "ilike", like_pattern(term)),
            ]
        )
        .limit(settings.DRUG_SEARCH_LIMIT)
        .execute()
    )
    logger.debug("Catalog search %r returned %d rows", term, len(result.rows))
    return normalize_drugs(result.rows)


def find_drug_by_barcode(store, barcode, settings=None):
    settings = settings or get_settings()
    barcode = str(barcode or "").strip()
    if not barcode:
        return None
    result = (
        store.table(settings.CATALOG_TABLE)
        .select("*")
        .eq(label(CATALOG_LABELS, "barcode"), barcode)
        .limit(1)
        .execute()
    )
    if not result.rows:
        return None
    return normalize_drug(result.rows[0])
