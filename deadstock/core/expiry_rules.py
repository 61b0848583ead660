from datetime import date, datetime, timedelta, timezone

from deadstock.core.dates import normalize_date

NEAR_EXPIRY_DAYS = 90


def _as_utc_datetime(value):
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def is_near_expiry(expiry_date, now=None, window_days=NEAR_EXPIRY_DAYS):
    # Upper bound only: stock that already expired counts as near-expiry.
    expiry = normalize_date(expiry_date)
    if expiry is None:
        return False
    if now is None:
        now = datetime.now(timezone.utc)
    elif isinstance(now, str):
        now = normalize_date(now)
        if now is None:
            return False
    remaining = _as_utc_datetime(expiry) - _as_utc_datetime(now)
    return remaining < timedelta(days=window_days)


def days_until_expiry(expiry_date, today=None):
    expiry = normalize_date(expiry_date)
    if expiry is None:
        return None
    return (expiry - (today or date.today())).days
