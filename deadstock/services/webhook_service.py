import json
import logging
from urllib import error, request
from urllib.parse import urlencode, urlparse, urlsplit, urlunsplit

from deadstock.config import get_settings

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}


class WebhookError(RuntimeError):
    def __init__(self, message, status_code=None, body=""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or ""


def _validate_webhook_url(url, setting_name):
    url = (url or "").strip()
    if not url:
        raise WebhookError("{} is not configured".format(setting_name))
    parsed = urlparse(url)
    if parsed.scheme.lower() not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise WebhookError("{} must be an absolute HTTP(S) URL".format(setting_name))
    return url


def with_record_id(url, record_id):
    scheme, netloc, path, query, fragment = urlsplit(url)
    extra = urlencode({"id": record_id})
    query = "{}&{}".format(query, extra) if query else extra
    return urlunsplit((scheme, netloc, path, query, fragment))


def _read_body(source):
    try:
        body_bytes = source.read()
    except (OSError, ValueError):
        return ""
    if not body_bytes:
        return ""
    return body_bytes.decode("utf-8", errors="replace").strip()


def _raise_http_error(exc):
    body = _read_body(exc)
    if body:
        message = "Webhook error: HTTP {} {}".format(exc.code, body)
    else:
        message = "Webhook error: HTTP {}".format(exc.code)
    raise WebhookError(message, status_code=exc.code, body=body) from exc


def decode_body(body):
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body


class WebhookClient:
    """Create/delete side-channel: JSON ``{"payload": ...}`` POSTs and ``?id=`` DELETEs."""

    def __init__(self, settings=None, opener=None):
        self._settings = settings or get_settings()
        self._timeout = self._settings.WEBHOOK_TIMEOUT_SECONDS
        self._opener = opener or request.urlopen

    @property
    def offer_url(self):
        return _validate_webhook_url(self._settings.OFFER_WEBHOOK_URL, "OFFER_WEBHOOK_URL")

    @property
    def request_url(self):
        return _validate_webhook_url(self._settings.REQUEST_WEBHOOK_URL, "REQUEST_WEBHOOK_URL")

    @property
    def register_url(self):
        return _validate_webhook_url(self._settings.REGISTER_WEBHOOK_URL, "REGISTER_WEBHOOK_URL")

    @property
    def profile_url(self):
        return _validate_webhook_url(self._settings.PROFILE_WEBHOOK_URL, "PROFILE_WEBHOOK_URL")

    def _send(self, req):
        try:
            with self._opener(req, timeout=self._timeout) as response:  # nosec B310
                status_code = response.getcode()
                body = _read_body(response)
                if status_code < 200 or status_code >= 300:
                    raise WebhookError(
                        "Webhook error: HTTP {}".format(status_code),
                        status_code=status_code,
                        body=body,
                    )
                return decode_body(body)
        except error.HTTPError as exc:
            _raise_http_error(exc)
        except error.URLError as exc:
            raise WebhookError("Webhook error: {}".format(exc.reason)) from exc
        except OSError as exc:
            raise WebhookError("Webhook error: {}".format(exc)) from exc

    def post_payload(self, url, payload):
        data = json.dumps({"payload": payload}, ensure_ascii=False).encode("utf-8")
        req = request.Request(
            url,
            data=data,
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        logger.info("POST %s", url)
        return self._send(req)

    def delete_record(self, url, record_id):
        target = with_record_id(url, record_id)
        req = request.Request(target, method="DELETE")
        logger.info("DELETE %s", target)
        return self._send(req)


__all__ = ["WebhookClient", "WebhookError", "decode_body", "with_record_id"]
