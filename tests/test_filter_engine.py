import unittest

from deadstock.schemas.offer import Offer, OfferFilter
from deadstock.services.filter_engine import filter_offers


class FilterEngineTest(unittest.TestCase):
    def setUp(self):
        self.offers = [
            Offer(id="1", name_en="Panadol Extra", name_ar="بنادول", barcode="622100", city="Cairo", discount=30),
            Offer(id="2", name_en="Augmentin 1g", name_ar="اوجمنتين", barcode="622200", city="Giza", discount=10),
            Offer(id="3", name_en="Brufen", name_ar="بروفين", barcode="733300", city="Cairo", discount=50),
        ]

    def _ids(self, offers):
        return [offer.id for offer in offers]

    def test_query_matches_english_case_insensitively(self):
        self.assertEqual(self._ids(filter_offers(self.offers, OfferFilter(query="PANADOL"))), ["1"])

    def test_query_matches_arabic_name(self):
        self.assertEqual(self._ids(filter_offers(self.offers, OfferFilter(query="بروفين"))), ["3"])

    def test_whitespace_query_is_matched_literally(self):
        cases = {" ": ["1", "2"], " extra": ["1"], "  ": []}
        for query, expected in cases.items():
            with self.subTest(query=query):
                self.assertEqual(self._ids(filter_offers(self.offers, OfferFilter(query=query))), expected)

    def test_query_matches_barcode_substring(self):
        self.assertEqual(self._ids(filter_offers(self.offers, OfferFilter(query="6222"))), ["2"])

    def test_city_is_exact_match(self):
        self.assertEqual(self._ids(filter_offers(self.offers, OfferFilter(city="Cairo"))), ["1", "3"])
        self.assertEqual(filter_offers(self.offers, OfferFilter(city="cairo")), [])

    def test_predicates_combine(self):
        criteria = OfferFilter(query="", city="Cairo", min_discount=40)
        self.assertEqual(self._ids(filter_offers(self.offers, criteria)), ["3"])

    def test_min_discount_returns_subset(self):
        for threshold in (0, 10, 11, 30, 50, 51, 100):
            with self.subTest(threshold=threshold):
                result = filter_offers(self.offers, OfferFilter(min_discount=threshold))
                self.assertTrue(all(offer.discount >= threshold for offer in result))
                self.assertTrue(all(offer in self.offers for offer in result))

    def test_reset_returns_ranked_input_unchanged(self):
        filter_offers(self.offers, OfferFilter(query="brufen", city="Cairo", min_discount=20))
        result = filter_offers(self.offers, OfferFilter(query="", city="", min_discount=0))
        self.assertEqual(result, self.offers)
        self.assertIsNot(result, self.offers)
        self.assertEqual(self._ids(self.offers), ["1", "2", "3"])


if __name__ == "__main__":
    unittest.main()
