import re
from datetime import date, datetime, timezone

_YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        if _YEAR_MONTH_RE.match(value_text):
            value_text = value_text + "-01"
        try:
            return date.fromisoformat(value_text)
        except ValueError:
            try:
                return datetime.fromisoformat(value_text.replace("Z", "+00:00")).date()
            except ValueError:
                return None
    return None


def parse_timestamp(value):
    """Parse a creation timestamp into an aware datetime (UTC when naive)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            parsed = datetime.fromisoformat(value_text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def canonical_expiry(value):
    """Turn a month value ("2024-06") into the first day of that month.

    Full dates pass through unchanged. Anything else comes back stripped so
    the validator can reject it.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    value_text = str(value).strip()
    if _YEAR_MONTH_RE.match(value_text):
        return value_text + "-01"
    return value_text
