"""Calendar date helpers for checklist values and derived dates."""

import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional


def to_calendar_date(value: Any) -> Optional[date]:
    """
    Coerce a metadata or column value to a calendar date.

    Time-of-day and timezone are dropped; a datetime keeps the calendar day
    it carries.

    Args:
        value: date, datetime, ISO-8601 string, or None/""

    Returns:
        date, or None when the value is empty

    Raises:
        ValueError: If a string is not ISO-8601 or the type is unsupported
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    raise ValueError(f"Cannot interpret {value!r} as a date")


def add_years(value: date, years: int) -> date:
    """
    Add calendar years.

    29 February maps to 28 February in non-leap target years.

    Args:
        value: Start date
        years: Number of years (may be negative)

    Returns:
        Shifted date
    """
    target_year = value.year + years
    day = min(value.day, calendar.monthrange(target_year, value.month)[1])
    return value.replace(year=target_year, day=day)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a timestamp to an aware UTC datetime.

    Naive values are assumed to be UTC (SQLite returns naive datetimes).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
