"""Calendar-day helpers used by the commitment analyzer.

Dates are plain ``datetime.date`` values with no time-of-day component and
travel as ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, tzinfo

from .models import DateParseError

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_months(d: date, months: int) -> date:
    """Add calendar months; a day past the target month's end rolls forward.

    Jan 31 + 1 month lands on Mar 3 (Mar 2 in leap years).
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    first = date(year, month + 1, 1)
    return first + timedelta(days=d.day - 1)


def is_same_day(a: date, b: date) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def format_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    match = _ISO_DATE.match(str(value or ""))
    if not match:
        raise DateParseError(f"Invalid date format: {value!r}. Expected YYYY-MM-DD")

    year, month, day = (int(part) for part in match.groups())
    if month < 1 or month > 12:
        raise DateParseError(f"Invalid month: {month}")
    if day < 1 or day > 31:
        raise DateParseError(f"Invalid day: {day}")
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise DateParseError(f"Invalid date: {value}") from exc


def parse_optional_date(value: str | None) -> date | None:
    """Parse a date, mapping empty values to ``None`` (unbounded)."""
    if value is None or not str(value).strip():
        return None
    return parse_date(str(value).strip())


def compare(a: date, b: date) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def today(tz: tzinfo | None = None) -> date:
    """Today's date in ``tz``, or in the local zone when omitted."""
    if tz is None:
        return date.today()
    return datetime.now(tz).date()
