"""Utility functions for working with dates and times."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Final, Tuple

__all__ = [
    "get_current_timestamp",
    "normalize_date",
    "normalize_time",
    "INVALID_DATE_MESSAGE",
    "INVALID_TIME_MESSAGE",
]

INVALID_DATE_MESSAGE: Final[str] = "Invalid date format"
INVALID_TIME_MESSAGE: Final[str] = "Invalid time format. Use HH:MM or HH:MM AM/PM"

# Non-ISO spellings accepted for event dates, tried in order.
_DATE_FORMATS: Final[Tuple[str, ...]] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%a, %d %b %Y %H:%M:%S",
)

_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^([0-9]{1,2}):([0-9]{2})(?:\s*(AM|PM))?$", re.IGNORECASE | re.ASCII
)


def get_current_timestamp() -> datetime:
    """Return the current UTC datetime with micro-second precision.

    This object can be stored directly in MongoDB where it will be written as
    a BSON Date.
    """
    return datetime.now(tz=timezone.utc)


def _parse_calendar_date(value: str) -> date:
    text = value.strip()
    if not text or not text.isascii():
        raise ValueError(INVALID_DATE_MESSAGE)

    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass

    # Drop a trailing "GMT"/"UTC" marker so RFC-style strings still parse
    text = re.sub(r"\s+(GMT|UTC)$", "", text, flags=re.IGNORECASE)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(INVALID_DATE_MESSAGE)


def normalize_date(value: str) -> str:
    """Normalize a date string to the ISO calendar date ``YYYY-MM-DD``.

    Accepts ISO 8601 dates and date-times as well as common written forms
    such as ``"March 5, 2025"``. Time of day and timezone are discarded; the
    calendar date is taken as written.

    Raises
    ------
    ValueError
        If *value* cannot be parsed as a calendar date.
    """
    if not isinstance(value, str):
        raise ValueError(INVALID_DATE_MESSAGE)
    return _parse_calendar_date(value).isoformat()


def normalize_time(value: str) -> str:
    """Normalize a time string to 24-hour ``HH:MM``.

    Accepts ``H:MM`` or ``HH:MM``, optionally followed by ``AM``/``PM``
    (case-insensitive, optional space). With a suffix the hour must be 1-12;
    without one it must be 0-23.

    Raises
    ------
    ValueError
        If *value* does not match the grammar or holds out-of-range values.
    """
    if not isinstance(value, str):
        raise ValueError(INVALID_TIME_MESSAGE)
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(INVALID_TIME_MESSAGE)

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    if minutes > 59:
        raise ValueError("Invalid time values")

    if period:
        if not 1 <= hours <= 12:
            raise ValueError("Invalid time values")
        period = period.upper()
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
    elif hours > 23:
        raise ValueError("Invalid time values")

    return f"{hours:02d}:{minutes:02d}"
