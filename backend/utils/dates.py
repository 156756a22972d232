# backend/utils/dates.py
"""
Date helpers shared by the card renderer, PDF summary and status lookup.

Stored dates arrive in several shapes (plain ISO date, ISO datetime written
by browsers, DD-MM-YYYY typed by hand). Display always uses DD-MM-YYYY.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

NOT_AVAILABLE = "N/A"

DateLike = Union[str, date, datetime, None]

# Extended calendar date, alone or followed by a time; the rest is left
# to datetime.fromisoformat.
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}(?:$|[T ])")
_DAY_FIRST = re.compile(r"^(\d{2})-(\d{2})-(\d{4})(?:\s.*)?$")

# Lenient shapes for comparisons: any of "-", "/", "." as separator,
# anything after the date part is ignored.
_LENIENT_YEAR_FIRST = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?:[T\s].*)?$")
_LENIENT_DAY_FIRST = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})(?:[T\s].*)?$")


def _build(year: str, month: str, day: str) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _strict_parse(value: str) -> Optional[date]:
    if _ISO_PREFIX.match(value):
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None

    match = _DAY_FIRST.match(value)
    if match:
        day, month, year = match.groups()
        return _build(year, month, day)

    return None


def format_display_date(value: DateLike) -> str:
    """
    Formats a date for display as DD-MM-YYYY.

    Accepted strings: ``YYYY-MM-DD``, ISO-8601 datetime and ``DD-MM-YYYY``
    optionally followed by a time. Anything else gives ``N/A``.

    Examples:
        >>> format_display_date("1990-05-14")
        '14-05-1990'
        >>> format_display_date("1990-05-14T00:00:00.000Z")
        '14-05-1990'
        >>> format_display_date("14/05/1990")
        'N/A'
    """
    if value is None:
        return NOT_AVAILABLE

    if isinstance(value, (date, datetime)):
        return value.strftime("%d-%m-%Y")

    parsed = _strict_parse(str(value).strip())
    if parsed is None:
        return NOT_AVAILABLE
    return parsed.strftime("%d-%m-%Y")


def date_part(value: DateLike) -> Optional[date]:
    """
    Extracts the calendar date from a value, ignoring time-of-day and
    separator differences. Returns None when no date can be recognised.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    match = _LENIENT_YEAR_FIRST.match(text)
    if match:
        return _build(*match.groups())

    match = _LENIENT_DAY_FIRST.match(text)
    if match:
        day, month, year = match.groups()
        return _build(year, month, day)

    return None


def same_date(left: DateLike, right: DateLike) -> bool:
    """True when both values carry the same calendar date."""
    left_date = date_part(left)
    right_date = date_part(right)
    return left_date is not None and left_date == right_date


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Submission timestamp as shown on the status page, e.g. '14 May 2024, 10:30 AM'."""
    if value is None:
        return None
    return value.strftime("%d %b %Y, %I:%M %p")
