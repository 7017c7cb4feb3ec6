"""Shared parsing and formatting helpers for calendar dates and times of day."""

import re
from datetime import date, datetime, time
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` value, returning None when it is not well formed.

    Examples:
        >>> parse_date("2025-03-10")
        datetime.date(2025, 3, 10)
        >>> parse_date("2025-3-10") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_time_of_day(value: Union[str, time, None]) -> Optional[time]:
    """Parse a two-digit ``HH:MM`` form value, returning None otherwise.

    Backend rows carrying ``HH:MM:SS`` are read through the pydantic models,
    not through this helper.

    Examples:
        >>> parse_time_of_day("09:05")
        datetime.time(9, 5)
        >>> parse_time_of_day("9:5") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
        return None
    return datetime.strptime(value.strip(), TIME_FORMAT).time()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def format_time_12h(value: Optional[time]) -> str:
    """Format a time of day for display.

    Examples:
        >>> format_time_12h(time(9, 0))
        '9:00 AM'
        >>> format_time_12h(time(0, 30))
        '12:30 AM'
    """
    if value is None:
        return ""
    period = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {period}"


def is_blank(value: object) -> bool:
    """True for None and whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
