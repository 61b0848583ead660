"""Turn raw store rows into canonical ``Drug``/``Offer``/``MarketRequest`` values.

Reads never fail on a single bad row: numeric columns that do not parse
default to 0 and unreadable dates become None.
"""
import logging
import math

from deadstock.core.dates import normalize_date, parse_timestamp
from deadstock.core.field_labels import (
    CATALOG_LABELS,
    OFFER_LABELS,
    REQUEST_LABELS,
    to_canonical,
)
from deadstock.schemas.drug import Drug
from deadstock.schemas.offer import Offer
from deadstock.schemas.request import MarketRequest

logger = logging.getLogger(__name__)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def to_number(value, default=0.0):
    if _is_blank(value) or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        numeric = float(value)
    else:
        try:
            numeric = float(str(value).strip().replace(",", ""))
        except ValueError:
            return default
    if math.isnan(numeric) or math.isinf(numeric):
        return default
    return numeric


def to_whole_number(value, default=0):
    numeric = to_number(value, default=None)
    if numeric is None:
        return default
    return int(numeric)


def to_text(value):
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_drug(row):
    values = to_canonical(CATALOG_LABELS, row)
    manufacturer = to_text(values["manufacturer"]) or None
    return Drug(
        id=to_text(values["id"]),
        barcode=to_text(values["barcode"]),
        name_en=to_text(values["name_en"]),
        name_ar=to_text(values["name_ar"]),
        price=to_number(values["price"]),
        manufacturer=manufacturer,
    )


def normalize_offer(row):
    values = to_canonical(OFFER_LABELS, row)
    return Offer(
        id=to_text(values["id"]),
        pharmacy_id=to_whole_number(values["pharmacy_id"]),
        drug_id=to_text(values["drug_id"]),
        name_en=to_text(values["name_en"]),
        name_ar=to_text(values["name_ar"]),
        barcode=to_text(values["barcode"]),
        expiry_date=normalize_date(values["expiry_date"]),
        discount=to_whole_number(values["discount"]),
        price=to_number(values["price"]),
        quantity=to_whole_number(values["quantity"]),
        city=to_text(values["city"]),
        pharmacy_name=to_text(values["pharmacy_name"]),
        pharmacy_address=to_text(values["pharmacy_address"]),
        created_at=parse_timestamp(values["created_at"]),
        status=to_text(values["status"]) or None,
    )


def normalize_request(row):
    values = to_canonical(REQUEST_LABELS, row)
    return MarketRequest(
        id=to_text(values["id"]),
        pharmacy_id=to_whole_number(values["pharmacy_id"]),
        drug_id=to_text(values["drug_id"]),
        name_en=to_text(values["name_en"]),
        name_ar=to_text(values["name_ar"]),
        barcode=to_text(values["barcode"]),
        quantity=to_whole_number(values["quantity"]),
        created_at=parse_timestamp(values["created_at"]),
    )


def _normalize_rows(rows, normalizer, kind):
    normalized = []
    for row in rows or []:
        if not isinstance(row, dict):
            logger.warning("Skipping non-object %s row: %r", kind, row)
            continue
        normalized.append(normalizer(row))
    return normalized


def normalize_drugs(rows):
    return _normalize_rows(rows, normalize_drug, "catalog")


def normalize_offers(rows):
    return _normalize_rows(rows, normalize_offer, "offer")


def normalize_requests(rows):
    return _normalize_rows(rows, normalize_request, "request")
