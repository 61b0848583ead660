"""Checks and payload shaping for offer and request submissions.

Validation is pure: it returns a ``ValidationResult`` and leaves it to the
caller to ask the user about warnings before dispatching the payload.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from deadstock.core.dates import canonical_expiry, normalize_date
from deadstock.core.field_labels import OFFER_LABELS, REQUEST_LABELS, to_labels

_NON_DIGIT_RE = re.compile(r"\D+")

MIN_DISCOUNT = 0
MAX_DISCOUNT = 100


class ValidationStatus(str, Enum):
    OK = "ok"
    WARN = "warn"
    REJECT = "reject"


@dataclass
class ValidationResult:
    status: ValidationStatus
    reasons: List[str] = field(default_factory=list)
    payload: Optional[dict] = None

    @property
    def is_ok(self) -> bool:
        return self.status is ValidationStatus.OK

    @property
    def needs_confirmation(self) -> bool:
        return self.status is ValidationStatus.WARN

    @property
    def is_rejected(self) -> bool:
        return self.status is ValidationStatus.REJECT


def digits_value(value):
    """Strip every non-digit character and read what is left as an integer."""
    if value is None:
        return 0
    digits = _NON_DIGIT_RE.sub("", str(value))
    return int(digits) if digits else 0


def find_duplicate_offer(offers, barcode, expiry):
    target_barcode = digits_value(barcode)
    target_expiry = normalize_date(canonical_expiry(expiry))
    if not target_barcode or target_expiry is None:
        return None
    for offer in offers:
        if digits_value(offer.barcode) == target_barcode and offer.expiry_date == target_expiry:
            return offer
    return None


def _drug_reasons(drug):
    if drug is None:
        return ["drug_required"]
    if digits_value(drug.barcode) == 0:
        return ["barcode_invalid"]
    return []


def offer_reasons(draft):
    reasons = _drug_reasons(draft.drug)
    expiry = canonical_expiry(draft.expiry)
    if not expiry:
        reasons.append("expiry_required")
    elif normalize_date(expiry) is None:
        reasons.append("expiry_invalid")
    if draft.discount is None or not MIN_DISCOUNT <= draft.discount <= MAX_DISCOUNT:
        reasons.append("discount_out_of_range")
    if draft.quantity is None or draft.quantity < 1:
        reasons.append("quantity_too_small")
    if draft.price is None or draft.price <= 0:
        reasons.append("price_not_positive")
    return reasons


def request_reasons(draft):
    reasons = _drug_reasons(draft.drug)
    if draft.quantity is None or draft.quantity < 1:
        reasons.append("quantity_too_small")
    return reasons


def can_submit_offer(draft):
    return not offer_reasons(draft)


def can_submit_request(draft):
    return not request_reasons(draft)


def build_offer_payload(draft, pharmacy_id):
    drug = draft.drug
    return to_labels(
        OFFER_LABELS,
        {
            "pharmacy_id": pharmacy_id,
            "drug_id": drug.id,
            "name_en": drug.name_en,
            "name_ar": drug.name_ar,
            "barcode": digits_value(drug.barcode),
            "expiry_date": canonical_expiry(draft.expiry),
            "discount": draft.discount,
            "price": draft.price,
            "quantity": draft.quantity,
        },
    )


def build_request_payload(draft, pharmacy_id):
    drug = draft.drug
    return to_labels(
        REQUEST_LABELS,
        {
            "pharmacy_id": pharmacy_id,
            "drug_id": drug.id,
            "name_en": drug.name_en,
            "name_ar": drug.name_ar,
            "barcode": digits_value(drug.barcode),
            "quantity": draft.quantity,
        },
    )


def validate_offer_submission(draft, pharmacy_id, existing_offers=()):
    reasons = offer_reasons(draft)
    if reasons:
        return ValidationResult(ValidationStatus.REJECT, reasons)

    payload = build_offer_payload(draft, pharmacy_id)
    if find_duplicate_offer(existing_offers, draft.drug.barcode, draft.expiry):
        return ValidationResult(ValidationStatus.WARN, ["duplicate_offer"], payload)
    return ValidationResult(ValidationStatus.OK, [], payload)


def validate_request_submission(draft, pharmacy_id):
    # Requests express demand, so repeated requests for one drug are allowed.
    reasons = request_reasons(draft)
    if reasons:
        return ValidationResult(ValidationStatus.REJECT, reasons)
    return ValidationResult(ValidationStatus.OK, [], build_request_payload(draft, pharmacy_id))
