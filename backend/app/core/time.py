"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def utc_today() -> date:
    """Calendar date in UTC, used as the default recording date of a mark."""
    return utc_now().date()


def current_year() -> int:
    return utc_now().year
