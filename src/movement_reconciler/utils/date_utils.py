"""Date parsing and formatting utilities."""

import re
from datetime import date, datetime, timedelta

# Strict calendar date accepted on input
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ISO_DATE_FORMAT = "%Y-%m-%d"


def is_iso_date(raw_date: object) -> bool:
    """Check that a value is a real calendar date written as YYYY-MM-DD.

    Rejects well-shaped but impossible dates such as 2024-13-45 or 2023-02-29.

    Args:
        raw_date: Value to check.

    Returns:
        True if the value can be parsed by parse_iso_date.
    """
    if not isinstance(raw_date, str) or not ISO_DATE_PATTERN.match(raw_date):
        return False
    try:
        datetime.strptime(raw_date, ISO_DATE_FORMAT)
    except ValueError:
        return False
    return True


def parse_iso_date(raw_date: str | date) -> date:
    """Parse a YYYY-MM-DD string into a date.

    Args:
        raw_date: The date string (a date instance is returned unchanged).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if not isinstance(raw_date, str) or not ISO_DATE_PATTERN.match(raw_date):
        raise ValueError(f"Cannot parse date: '{raw_date}'")
    return datetime.strptime(raw_date, ISO_DATE_FORMAT).date()


def date_to_iso(d: date) -> str:
    """Convert a date to ISO 8601 format (YYYY-MM-DD).

    Args:
        d: Date to convert.

    Returns:
        ISO format date string.
    """
    return d.isoformat()


def date_to_iso_instant(d: date) -> str:
    """Render a calendar date as a UTC midnight instant.

    Example: date(2024, 1, 31) -> "2024-01-31T00:00:00.000Z"

    Args:
        d: Date to convert.

    Returns:
        ISO 8601 instant string with millisecond precision.
    """
    return f"{d.isoformat()}T00:00:00.000Z"


def latest_allowed_date(grace_days: int, today: date | None = None) -> date:
    """Return the last date accepted as "not in the future".

    Args:
        grace_days: Days after today still accepted (timezone slack).
        today: Reference date (defaults to date.today()).

    Returns:
        Latest acceptable date.
    """
    if today is None:
        today = date.today()
    return today + timedelta(days=grace_days)


def earliest_allowed_date(max_age_years: int, today: date | None = None) -> date:
    """Return the oldest date accepted as "not too old".

    Args:
        max_age_years: Maximum age in years.
        today: Reference date (defaults to date.today()).

    Returns:
        Earliest acceptable date.
    """
    if today is None:
        today = date.today()
    year = today.year - max_age_years
    try:
        return today.replace(year=year)
    except ValueError:
        # Feb 29 on a non-leap target year
        return today.replace(year=year, day=28)
