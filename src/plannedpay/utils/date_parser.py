"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_OFFSET_PATTERN = re.compile(r"^(?:in (\d+) (day|week|month)s?|(\d+) (day|week|month)s? ago)$")


def _offset(count: int, unit: str) -> relativedelta:
    if unit == "day":
        return relativedelta(days=count)
    if unit == "week":
        return relativedelta(weeks=count)
    return relativedelta(months=count)


def _start_of(period: str, today: date) -> Optional[date]:
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "month":
        return today.replace(day=1)
    if period == "year":
        return today.replace(month=1, day=1)
    return None


def _relative(word: str, period: str, today: date) -> Optional[date]:
    """Resolve "last|this|next <period>"; None when the phrase is not understood."""
    start = _start_of(period, today)
    if start is not None:
        step = relativedelta(**{f"{period}s": 1})
        if word == "last":
            return start - step
        if word == "next":
            return start + step
        return start

    if period in WEEKDAY_NAMES and word in ("last", "next"):
        target = WEEKDAY_NAMES.index(period)
        if word == "next":
            return today + timedelta(days=(target - today.weekday()) % 7 or 7)
        return today - timedelta(days=(today.weekday() - target) % 7 or 7)
    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Named days: "today", "yesterday", "tomorrow"
    - Periods: "this month", "next week", "last year", "next friday"
    - Offsets: "in 3 days", "2 weeks ago"

    Periods resolve to their first day (weeks start on Monday).

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if today is None:
        today = date.today()

    named = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in named:
        return named[text]

    match = _OFFSET_PATTERN.match(text)
    if match:
        if match.group(1):
            return today + _offset(int(match.group(1)), match.group(2))
        return today - _offset(int(match.group(3)), match.group(4))

    word, _, period = text.partition(" ")
    if word in ("last", "this", "next"):
        resolved = _relative(word, period, today)
        if resolved is not None:
            return resolved

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
