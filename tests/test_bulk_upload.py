import os
import tempfile
import unittest
from datetime import datetime

from openpyxl import Workbook

from deadstock.schemas.pharmacy import PharmacyProfile
from deadstock.services.bulk_upload_service import (
    CREATED,
    DUPLICATE,
    FAILED,
    REJECTED,
    import_offers,
    normalize_header,
    validate_columns,
)
from deadstock.services.offer_service import OffersView
from deadstock.services.session_service import SessionContext
from deadstock.services.webhook_service import WebhookError
from tests.fakes import FakeStore, FakeWebhook

HEADERS = ["Item Barcode", "English Name", "Expiry Date", "Discount %", "Price", "Qty"]


class HeaderTest(unittest.TestCase):
    def test_aliases(self):
        cases = {
            "Item Barcode": "barcode",
            " Expiry Date ": "expiry",
            "Discount %": "discount",
            "Qty": "quantity",
            "Unit Price": "price",
            "Arabic Name": "name_ar",
            "Notes": "notes",
            None: "",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(normalize_header(raw), expected)

    def test_missing_columns(self):
        with self.assertRaises(ValueError) as ctx:
            validate_columns({"barcode", "price"})
        self.assertIn("discount", str(ctx.exception))


class ImportOffersTest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.store = FakeStore(
            {
                "Inventory Offers": [
                    {"id": "o1", "Pharmacy ID": 42, "barcode": "622100", "Expiry date": "2026-03-01"},
                ],
                "Master": [
                    {"id": "d1", "Item Barcode": "622100", "English name": "Panadol", "Price": 30},
                ],
            }
        )
        self.context = SessionContext(
            session_key="tab-1",
            pharmacy_id=42,
            profile=PharmacyProfile(id="42", city="Cairo"),
        )
        self.view = OffersView()

    def _workbook(self, rows, headers=HEADERS):
        path = os.path.join(self.tmpdir.name, "offers.xlsx")
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Offers"
        sheet.append(headers)
        for row in rows:
            sheet.append(row)
        workbook.save(path)
        return path

    def test_row_outcomes(self):
        path = self._workbook(
            [
                [622100, "Panadol", datetime(2026, 3, 1), 20, 30, 2],
                [622100, "Panadol", "2027-01", 15, 30, 1],
                [None, None, None, None, None, None],
                [999, "Unknown", "2027-02", 150, 10, 1],
                [777, "Other", "2027-02", "many", 10, 1],
                [622100, "Panadol", "2027-01", 10, 30, 3],
            ]
        )
        webhook = FakeWebhook()

        report = import_offers(path, self.view, self.store, webhook, self.context)

        statuses = [(outcome.row, outcome.status) for outcome in report.outcomes]
        self.assertEqual(
            statuses,
            [(2, DUPLICATE), (3, CREATED), (5, REJECTED), (6, REJECTED), (7, DUPLICATE)],
        )
        self.assertEqual(report.outcomes[2].reasons, ["discount_out_of_range"])
        self.assertEqual(len(webhook.posts), 1)
        payload = webhook.posts[0][1]
        self.assertEqual(payload["drug_id"], "d1")
        self.assertEqual(payload["Expiry date"], "2027-01-01")
        self.assertEqual(report.summary()[CREATED], 1)

    def test_allow_duplicates(self):
        path = self._workbook([[622100, "Panadol", "2026-03", 20, 30, 2]])
        webhook = FakeWebhook()

        report = import_offers(
            path, self.view, self.store, webhook, self.context, sheet="Offers", allow_duplicates=True
        )

        self.assertEqual(report.outcomes[0].status, CREATED)
        self.assertEqual(len(webhook.posts), 1)

    def test_webhook_failure_marks_row(self):
        path = self._workbook([[555, "Other", "2027-05", 10, 12.5, 4]])
        webhook = FakeWebhook(error=WebhookError("Webhook error: HTTP 500", status_code=500))

        report = import_offers(path, self.view, self.store, webhook, self.context)

        self.assertEqual(report.outcomes[0].status, FAILED)
        self.assertEqual(report.created, 0)

    def test_missing_columns_reject_sheet(self):
        path = self._workbook([[622100, 10]], headers=["Barcode", "Price"])
        with self.assertRaises(ValueError):
            import_offers(path, self.view, self.store, FakeWebhook(), self.context)

    def test_unknown_sheet(self):
        path = self._workbook([])
        with self.assertRaises(ValueError):
            import_offers(path, self.view, self.store, FakeWebhook(), self.context, sheet="Nope")


if __name__ == "__main__":
    unittest.main()
