from deadstock.services.activity_service import aggregate_activity
from deadstock.services.filter_engine import filter_offers
from deadstock.services.record_normalizer import normalize_drug, normalize_offer, normalize_request
from deadstock.services.submission_validator import (
    validate_offer_submission,
    validate_request_submission,
)

__all__ = [
    "aggregate_activity",
    "filter_offers",
    "normalize_drug",
    "normalize_offer",
    "normalize_request",
    "validate_offer_submission",
    "validate_request_submission",
]
