import unittest
from datetime import date

from deadstock.schemas.drug import Drug
from deadstock.schemas.offer import Offer
from deadstock.schemas.submission import OfferDraft, RequestDraft
from deadstock.services.submission_validator import (
    ValidationStatus,
    can_submit_offer,
    can_submit_request,
    digits_value,
    find_duplicate_offer,
    validate_offer_submission,
    validate_request_submission,
)

PANADOL = Drug(id="d1", barcode="123", name_en="Panadol", name_ar="بنادول", price=10)


def _draft(**overrides):
    values = dict(drug=PANADOL, expiry="2024-06", discount=20, quantity=5, price=12.5)
    values.update(overrides)
    return OfferDraft(**values)


class OfferValidationTest(unittest.TestCase):
    def setUp(self):
        self.existing = [Offer(id="o1", barcode="123", expiry_date=date(2024, 6, 1))]

    def test_same_barcode_and_expiry_needs_confirmation(self):
        result = validate_offer_submission(_draft(), 42, self.existing)
        self.assertEqual(result.status, ValidationStatus.WARN)
        self.assertTrue(result.needs_confirmation)
        self.assertEqual(result.reasons, ["duplicate_offer"])
        self.assertIsNotNone(result.payload)

    def test_different_expiry_is_ok(self):
        result = validate_offer_submission(_draft(expiry="2024-07"), 42, self.existing)
        self.assertTrue(result.is_ok)
        self.assertEqual(result.reasons, [])

    def test_payload_uses_store_labels(self):
        result = validate_offer_submission(_draft(expiry="2024-06"), 42, [])
        self.assertEqual(
            result.payload,
            {
                "Pharmacy ID": 42,
                "drug_id": "d1",
                "English name": "Panadol",
                "Arabic Name": "بنادول",
                "barcode": 123,
                "Expiry date": "2024-06-01",
                "discount": 20,
                "price": 12.5,
                "Quantity": 5,
            },
        )

    def test_full_date_expiry_is_sent_unchanged(self):
        result = validate_offer_submission(_draft(expiry="2024-06-15"), 42, [])
        self.assertEqual(result.payload["Expiry date"], "2024-06-15")

    def test_missing_drug_is_rejected(self):
        result = validate_offer_submission(OfferDraft(), 42, [])
        self.assertTrue(result.is_rejected)
        self.assertIn("drug_required", result.reasons)
        self.assertIn("expiry_required", result.reasons)
        self.assertIn("price_not_positive", result.reasons)
        self.assertIsNone(result.payload)

    def test_discount_bounds(self):
        cases = [(-1, False), (0, True), (100, True), (101, False)]
        for discount, accepted in cases:
            with self.subTest(discount=discount):
                result = validate_offer_submission(_draft(discount=discount), 42, [])
                self.assertEqual(result.is_ok, accepted)
                if not accepted:
                    self.assertIn("discount_out_of_range", result.reasons)

    def test_quantity_and_price_rules(self):
        self.assertIn("quantity_too_small", validate_offer_submission(_draft(quantity=0), 42, []).reasons)
        self.assertIn("price_not_positive", validate_offer_submission(_draft(price=0), 42, []).reasons)
        self.assertIn("price_not_positive", validate_offer_submission(_draft(price=-3), 42, []).reasons)

    def test_barcode_must_reduce_to_nonzero_number(self):
        for barcode in ("", "abc", "00", "--"):
            with self.subTest(barcode=barcode):
                drug = Drug(id="d2", barcode=barcode)
                result = validate_offer_submission(_draft(drug=drug), 42, [])
                self.assertEqual(result.reasons, ["barcode_invalid"])

    def test_unreadable_expiry_is_rejected(self):
        result = validate_offer_submission(_draft(expiry="next spring"), 42, [])
        self.assertEqual(result.reasons, ["expiry_invalid"])

    def test_duplicate_ignores_barcode_formatting(self):
        drug = Drug(id="d1", barcode="12-3")
        self.assertIsNotNone(find_duplicate_offer(self.existing, drug.barcode, "2024-06-01"))
        self.assertIsNone(find_duplicate_offer(self.existing, "124", "2024-06-01"))

    def test_can_submit_offer(self):
        self.assertTrue(can_submit_offer(_draft()))
        self.assertFalse(can_submit_offer(_draft(expiry="")))


class RequestValidationTest(unittest.TestCase):
    def test_valid_request_payload(self):
        result = validate_request_submission(RequestDraft(drug=PANADOL, quantity=3), 42)
        self.assertTrue(result.is_ok)
        self.assertEqual(
            result.payload,
            {
                "Pharmacy ID": 42,
                "drug_id": "d1",
                "English name": "Panadol",
                "Arabic Name": "بنادول",
                "barcode": 123,
                "Quantity": 3,
            },
        )

    def test_request_rules(self):
        self.assertEqual(validate_request_submission(RequestDraft(), 42).reasons, ["drug_required"])
        self.assertEqual(
            validate_request_submission(RequestDraft(drug=PANADOL, quantity=0), 42).reasons,
            ["quantity_too_small"],
        )
        self.assertEqual(
            validate_request_submission(RequestDraft(drug=Drug(id="x", barcode="n/a")), 42).reasons,
            ["barcode_invalid"],
        )
        self.assertTrue(can_submit_request(RequestDraft(drug=PANADOL)))


class DigitsValueTest(unittest.TestCase):
    def test_strips_non_digits(self):
        self.assertEqual(digits_value("+20 (100) 123"), 20100123)
        self.assertEqual(digits_value(622100), 622100)
        self.assertEqual(digits_value(""), 0)
        self.assertEqual(digits_value(None), 0)


if __name__ == "__main__":
    unittest.main()
