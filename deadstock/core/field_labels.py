"""External column labels of the hosted store.

Offers and requests are keyed by display labels such as "English name" or
"Pharmacy ID". This module is the only place that knows those labels; the
rest of the package works with the canonical field names on the left.
"""

OFFER_LABELS = {
    "id": "id",
    "pharmacy_id": "Pharmacy ID",
    "drug_id": "drug_id",
    "name_en": "English name",
    "name_ar": "Arabic Name",
    "barcode": "barcode",
    "expiry_date": "Expiry date",
    "discount": "discount",
    "price": "price",
    "quantity": "Quantity",
    "city": "city",
    "pharmacy_name": "pharmacy_name",
    "pharmacy_address": "pharmacy_address",
    "created_at": "created_at",
    "status": "status",
}

REQUEST_LABELS = {
    "id": "id",
    "pharmacy_id": "Pharmacy ID",
    "drug_id": "drug_id",
    "name_en": "English name",
    "name_ar": "Arabic Name",
    "barcode": "barcode",
    "quantity": "Quantity",
    "created_at": "created_at",
}

CATALOG_LABELS = {
    "id": "id",
    "barcode": "Item Barcode",
    "name_en": "English name",
    "name_ar": "Arabic Name",
    "price": "Price",
    "manufacturer": "manufacturer",
}


def label(labels, field):
    try:
        return labels[field]
    except KeyError:
        raise KeyError("Unknown field: {}".format(field)) from None


def to_canonical(labels, row):
    """Pick the labelled columns out of a raw row, keyed by canonical name."""
    row = row or {}
    return {field: row.get(column) for field, column in labels.items()}


def to_labels(labels, values):
    """Rename canonical keys to store labels, dropping unknown keys."""
    return {labels[field]: value for field, value in values.items() if field in labels}


__all__ = [
    "CATALOG_LABELS",
    "OFFER_LABELS",
    "REQUEST_LABELS",
    "label",
    "to_canonical",
    "to_labels",
]
