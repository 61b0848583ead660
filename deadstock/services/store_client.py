"""Filtered-select client for the hosted store's REST interface.

Mirrors the query surface the screens rely on: ``select``, ``eq``,
``ilike``, ``or_``, ``order``, ``limit`` and exact/head counts.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib import error, request
from urllib.parse import quote, urlencode, urlparse

from deadstock.config import get_settings

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}
_PLAIN_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_RESERVED_VALUE_CHARS = set(',()"')
_CONTENT_RANGE_TOTAL_RE = re.compile(r"/(\d+)\s*$")


class StoreError(RuntimeError):
    pass


@dataclass
class QueryResult:
    rows: List[dict] = field(default_factory=list)
    count: Optional[int] = None


def quote_identifier(name):
    if _PLAIN_IDENTIFIER_RE.match(name):
        return name
    return '"{}"'.format(name.replace('"', '\\"'))


def _format_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_or_value(value):
    value_text = _format_value(value)
    if any(char in _RESERVED_VALUE_CHARS for char in value_text):
        return '"{}"'.format(value_text.replace('"', '\\"'))
    return value_text


def like_pattern(term):
    return "%{}%".format(term)


def parse_content_range(value):
    if not value:
        return None
    match = _CONTENT_RANGE_TOTAL_RE.search(value)
    if not match:
        return None
    return int(match.group(1))


def _validate_base_url(base_url):
    parsed = urlparse(base_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise RuntimeError("STORE_URL must be an absolute HTTP(S) URL")
    return base_url.rstrip("/")


def _raise_http_error(exc):
    body = ""
    try:
        body_bytes = exc.read()
        if body_bytes:
            body = body_bytes.decode("utf-8", errors="replace").strip()
    except (OSError, ValueError):
        body = ""

    if body:
        raise StoreError("Store query error: HTTP {} {}".format(exc.code, body)) from exc
    raise StoreError("Store query error: HTTP {}".format(exc.code)) from exc


class StoreQuery:
    def __init__(self, client, table):
        self._client = client
        self._table = table
        self._columns = "*"
        self._count = None
        self._head = False
        self._params = []

    def select(self, columns="*", count=None, head=False):
        self._columns = columns
        self._count = count
        self._head = head
        return self

    def eq(self, field_name, value):
        self._params.append((field_name, "eq.{}".format(_format_value(value))))
        return self

    def ilike(self, field_name, term):
        self._params.append((field_name, "ilike.{}".format(like_pattern(term))))
        return self

    def or_(self, predicates):
        """``predicates`` is a sequence of ``(field, operator, value)`` triples."""
        parts = [
            "{}.{}.{}".format(quote_identifier(name), operator, _format_or_value(value))
            for name, operator, value in predicates
        ]
        self._params.append(("or", "({})".format(",".join(parts))))
        return self

    def order(self, field_name, ascending=True):
        direction = "asc" if ascending else "desc"
        self._params.append(("order", "{}.{}".format(field_name, direction)))
        return self

    def limit(self, count):
        self._params.append(("limit", str(int(count))))
        return self

    @property
    def table(self):
        return self._table

    @property
    def params(self):
        return [("select", self._columns)] + list(self._params)

    @property
    def count_mode(self):
        return self._count

    @property
    def is_head(self):
        return self._head

    def build_url(self):
        query = urlencode(self.params, quote_via=quote, safe="*,.()")
        return "{}/rest/v1/{}?{}".format(
            self._client.base_url, quote(self._table, safe=""), query
        )

    def execute(self):
        return self._client.execute(self)


class StoreClient:
    def __init__(self, base_url, api_key, timeout=15, opener=None):
        if not base_url:
            raise RuntimeError("STORE_URL is not configured")
        if not api_key:
            raise RuntimeError("STORE_ANON_KEY is not configured")
        self.base_url = _validate_base_url(str(base_url).strip())
        self._api_key = str(api_key).strip()
        self._timeout = timeout
        self._opener = opener or request.urlopen

    @classmethod
    def from_settings(cls, settings=None, opener=None):
        settings = settings or get_settings()
        return cls(
            settings.STORE_URL,
            settings.STORE_ANON_KEY,
            timeout=settings.STORE_TIMEOUT_SECONDS,
            opener=opener,
        )

    def table(self, name):
        return StoreQuery(self, name)

    def _headers(self, query):
        headers = {
            "apikey": self._api_key,
            "Authorization": "Bearer {}".format(self._api_key),
            "Accept": "application/json",
        }
        if query.count_mode:
            headers["Prefer"] = "count={}".format(query.count_mode)
        return headers

    def execute(self, query):
        url = query.build_url()
        req = request.Request(
            url,
            method="HEAD" if query.is_head else "GET",
            headers=self._headers(query),
        )
        try:
            with self._opener(req, timeout=self._timeout) as response:  # nosec B310
                status_code = response.getcode()
                if status_code < 200 or status_code >= 300:
                    raise StoreError("Store query error: HTTP {}".format(status_code))
                body = b"" if query.is_head else response.read()
                content_range = response.headers.get("Content-Range")
        except error.HTTPError as exc:
            _raise_http_error(exc)
        except error.URLError as exc:
            raise StoreError("Store query error: {}".format(exc.reason)) from exc
        except OSError as exc:
            raise StoreError("Store query error: {}".format(exc)) from exc

        rows = []
        if body:
            try:
                rows = json.loads(body.decode("utf-8"))
            except ValueError as exc:
                raise StoreError("Store returned invalid JSON") from exc
            if not isinstance(rows, list):
                raise StoreError("Store returned a non-list result")
        count = parse_content_range(content_range) if query.count_mode else None
        logger.debug(
            "Store returned %d rows (count=%s)", len(rows), count, extra={"table": query.table}
        )
        return QueryResult(rows=rows, count=count)


__all__ = [
    "QueryResult",
    "StoreClient",
    "StoreError",
    "StoreQuery",
    "like_pattern",
    "parse_content_range",
    "quote_identifier",
]
