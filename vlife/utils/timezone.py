"""Timezone helpers.

Database drivers differ on whether they round-trip tzinfo (SQLite drops it),
so all arithmetic on stored timestamps goes through these helpers.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC.

    Args:
        dt: Datetime (timezone-aware or naive)

    Returns:
        Datetime in UTC timezone
    """
    if dt.tzinfo is None:
        # Assume UTC if naive
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_today(now: datetime | None = None) -> date:
    return to_utc(now or utc_now()).date()
