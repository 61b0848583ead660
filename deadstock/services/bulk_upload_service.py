import logging
from dataclasses import dataclass, field
from typing import List

from openpyxl import load_workbook

from deadstock.core.dates import canonical_expiry, normalize_date
from deadstock.schemas.drug import Drug
from deadstock.schemas.offer import Offer
from deadstock.schemas.submission import OfferDraft
from deadstock.services.drug_search_service import find_drug_by_barcode
from deadstock.services.store_client import StoreError
from deadstock.services.submission_validator import validate_offer_submission
from deadstock.services.webhook_service import WebhookError

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("barcode",), "barcode"),
    (("item", "barcode"), "barcode"),
    (("expiry",), "expiry"),
    (("expiry", "date"), "expiry"),
    (("exp", "date"), "expiry"),
    (("discount",), "discount"),
    (("discount", "percent"), "discount"),
    (("price",), "price"),
    (("unit", "price"), "price"),
    (("quantity",), "quantity"),
    (("qty",), "quantity"),
    (("english", "name"), "name_en"),
    (("name", "en"), "name_en"),
    (("arabic", "name"), "name_ar"),
    (("name", "ar"), "name_ar"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {"barcode", "expiry", "discount", "price", "quantity"}

CREATED = "created"
REJECTED = "rejected"
DUPLICATE = "duplicate"
FAILED = "failed"


@dataclass
class RowOutcome:
    row: int
    status: str
    reasons: List[str] = field(default_factory=list)


@dataclass
class BulkUploadReport:
    outcomes: List[RowOutcome] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == CREATED)

    def summary(self):
        counts = {CREATED: 0, REJECTED: 0, DUPLICATE: 0, FAILED: 0}
        for outcome in self.outcomes:
            counts[outcome.status] += 1
        return counts


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/", "%"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def load_offer_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for key in header_keys if key}

    rows = []
    for row_idx, row in enumerate(rows_iter, start=2):
        if row is None or all(_is_blank(value) for value in row):
            continue
        record = {key: row[idx] if idx < len(row) else None for idx, key in indices}
        rows.append((row_idx, record))
    return rows, columns


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - columns)
    if missing:
        raise ValueError("offers sheet missing columns: {}".format(", ".join(missing)))


def to_int(value, field_name):
    if _is_blank(value):
        raise ValueError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        numeric = float(str(value).strip().replace(",", ""))
    except ValueError:
        raise ValueError(f"{field_name} must be an integer") from None
    if not numeric.is_integer():
        raise ValueError(f"{field_name} must be an integer")
    return int(numeric)


def to_float(value, field_name):
    if _is_blank(value):
        raise ValueError(f"{field_name} is required")
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be a number") from None


def _barcode_text(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return "" if value is None else str(value).strip()


def resolve_drug(store, record):
    barcode = _barcode_text(record.get("barcode"))
    drug = None
    if barcode:
        try:
            drug = find_drug_by_barcode(store, barcode)
        except StoreError as exc:
            logger.warning("Catalog lookup for %s failed: %s", barcode, exc)
    if drug is not None:
        return drug
    return Drug(
        id="",
        barcode=barcode,
        name_en=str(record.get("name_en") or "").strip(),
        name_ar=str(record.get("name_ar") or "").strip(),
    )


def build_draft(store, record):
    return OfferDraft(
        drug=resolve_drug(store, record),
        expiry=canonical_expiry(record.get("expiry")),
        discount=to_int(record.get("discount"), "discount"),
        price=to_float(record.get("price"), "price"),
        quantity=to_int(record.get("quantity"), "quantity"),
    )


def _open_worksheet(source, sheet=None):
    workbook = load_workbook(source, read_only=True, data_only=True)
    if sheet:
        if sheet not in workbook.sheetnames:
            workbook.close()
            raise ValueError("Sheet not found: {}".format(sheet))
        return workbook, workbook[sheet]
    return workbook, workbook.active


def import_offers(source, view, store, webhook, context, sheet=None, allow_duplicates=False):
    """Create offers from a spreadsheet, one validated webhook call per row.

    ``source`` is anything ``openpyxl.load_workbook`` opens: a path or a
    binary file object.
    """
    pharmacy_id = context.require_pharmacy_id()
    if view.state.loaded_at is None:
        view.refresh(store, context)
    known = list(view.state.data)

    workbook, worksheet = _open_worksheet(source, sheet)
    try:
        rows, columns = load_offer_rows(worksheet)
    finally:
        workbook.close()
    validate_columns(columns)

    report = BulkUploadReport()
    for row_number, record in rows:
        try:
            draft = build_draft(store, record)
        except ValueError as exc:
            report.outcomes.append(RowOutcome(row_number, REJECTED, [str(exc)]))
            continue

        result = validate_offer_submission(draft, pharmacy_id, known)
        if result.is_rejected:
            report.outcomes.append(RowOutcome(row_number, REJECTED, result.reasons))
            continue
        if result.needs_confirmation and not allow_duplicates:
            report.outcomes.append(RowOutcome(row_number, DUPLICATE, result.reasons))
            continue

        try:
            webhook.post_payload(webhook.offer_url, result.payload)
        except WebhookError as exc:
            logger.warning(
                "Bulk offer row %s failed: %s",
                row_number,
                exc,
                extra={"pharmacy_id": pharmacy_id, "row": row_number},
            )
            report.outcomes.append(RowOutcome(row_number, FAILED, ["error_generic"]))
            continue

        report.outcomes.append(RowOutcome(row_number, CREATED))
        known.append(
            Offer(
                id="",
                pharmacy_id=pharmacy_id,
                barcode=draft.drug.barcode,
                expiry_date=normalize_date(draft.expiry),
            )
        )

    if report.created:
        view.refresh(store, context)
    logger.info("Bulk upload for pharmacy %s: %s", pharmacy_id, report.summary())
    return report
