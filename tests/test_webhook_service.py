import json
import unittest
from urllib import error

from deadstock.config import Settings
from deadstock.services.webhook_service import WebhookClient, WebhookError, with_record_id
from tests.fakes import FakeResponse, RecordingOpener, http_error_body

OFFER_URL = "https://hooks.example.com/webhook/add-offer"


def _settings(**overrides):
    values = dict(
        OFFER_WEBHOOK_URL=OFFER_URL,
        REQUEST_WEBHOOK_URL="https://hooks.example.com/webhook/add-request",
        WEBHOOK_TIMEOUT_SECONDS=3,
    )
    values.update(overrides)
    return Settings(**values)


class WebhookClientTest(unittest.TestCase):
    def test_post_wraps_payload(self):
        opener = RecordingOpener(FakeResponse(200, {"ok": True}))
        client = WebhookClient(_settings(), opener=opener)

        body = client.post_payload(client.offer_url, {"barcode": 123, "Quantity": 2})

        req = opener.last_request
        self.assertEqual(req.get_method(), "POST")
        self.assertEqual(req.full_url, OFFER_URL)
        self.assertEqual(req.get_header("Content-type"), "application/json")
        self.assertEqual(json.loads(req.data), {"payload": {"barcode": 123, "Quantity": 2}})
        self.assertEqual(body, {"ok": True})
        self.assertEqual(opener.requests[-1][1], 3)

    def test_empty_body_returns_none(self):
        client = WebhookClient(_settings(), opener=RecordingOpener(FakeResponse(204, b"")))
        self.assertIsNone(client.post_payload(OFFER_URL, {}))

    def test_delete_passes_id_as_query_parameter(self):
        opener = RecordingOpener(FakeResponse(200, b""))
        client = WebhookClient(_settings(), opener=opener)
        client.delete_record(client.offer_url, "abc-1")
        self.assertEqual(opener.last_request.get_method(), "DELETE")
        self.assertEqual(opener.last_request.full_url, OFFER_URL + "?id=abc-1")

    def test_with_record_id_keeps_existing_query(self):
        self.assertEqual(
            with_record_id("https://hooks.example.com/x?token=t", 5),
            "https://hooks.example.com/x?token=t&id=5",
        )

    def test_http_error_keeps_status_and_body(self):
        exc = error.HTTPError(OFFER_URL, 409, "conflict", {}, http_error_body("duplicate key"))
        client = WebhookClient(_settings(), opener=RecordingOpener(error=exc))
        with self.assertRaises(WebhookError) as ctx:
            client.post_payload(OFFER_URL, {})
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.body, "duplicate key")

    def test_network_error(self):
        client = WebhookClient(_settings(), opener=RecordingOpener(error=error.URLError("down")))
        with self.assertRaises(WebhookError) as ctx:
            client.delete_record(OFFER_URL, 1)
        self.assertIsNone(ctx.exception.status_code)

    def test_unconfigured_url(self):
        client = WebhookClient(_settings(REGISTER_WEBHOOK_URL=None), opener=RecordingOpener())
        with self.assertRaises(WebhookError):
            client.register_url
        bad = WebhookClient(_settings(OFFER_WEBHOOK_URL="ftp://hooks.example.com"), opener=RecordingOpener())
        with self.assertRaises(WebhookError):
            bad.offer_url


if __name__ == "__main__":
    unittest.main()
