import argparse

from openpyxl.utils.exceptions import InvalidFileException

from deadstock.core.logging import setup_logging
from deadstock.database.session import SessionLocal
from deadstock.services.bulk_upload_service import import_offers
from deadstock.services.offer_service import OffersView
from deadstock.services.session_service import (
    MissingSessionError,
    SessionStore,
    load_session_context,
)
from deadstock.services.store_client import StoreClient
from deadstock.services.webhook_service import WebhookClient


def parse_args():
    parser = argparse.ArgumentParser(
        description="Create offers for a pharmacy from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--sheet", default=None, help="Sheet name. Default: active sheet.")
    parser.add_argument(
        "--session-key",
        default="default",
        help="Session holding the pharmacy id to import for.",
    )
    parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Send rows that repeat an existing barcode and expiry date.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run.")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.log_level)
    context = load_session_context(SessionStore(SessionLocal), args.session_key)
    try:
        report = import_offers(
            args.path,
            OffersView(),
            StoreClient.from_settings(),
            WebhookClient(),
            context,
            sheet=args.sheet,
            allow_duplicates=args.allow_duplicates,
        )
    except MissingSessionError as exc:
        raise SystemExit(f"Import failed: complete the pharmacy profile first ({exc})") from exc
    except (OSError, ValueError, RuntimeError, InvalidFileException) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    for outcome in report.outcomes:
        if outcome.status == "created":
            continue
        print(f"  row {outcome.row}: {outcome.status} ({', '.join(outcome.reasons)})")
    summary = report.summary()
    print(
        f"{summary['created']} created, {summary['duplicate']} duplicates, "
        f"{summary['rejected']} rejected, {summary['failed']} failed"
    )


if __name__ == "__main__":
    main()
