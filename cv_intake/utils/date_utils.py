"""Calendar-day helpers for date-bucketed candidate queries (YYYY-MM-DD strings)."""

import re
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_iso_day(value: Optional[str]) -> bool:
    """True if value is a real calendar day in YYYY-MM-DD form."""
    if not value or not DAY_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_day(value: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    if not DAY_PATTERN.match(value or ""):
        raise ValueError(f"Invalid date format: {value!r}. Use YYYY-MM-DD")
    return date.fromisoformat(value)


def format_day(day: date) -> str:
    return day.isoformat()


def next_day(value: str) -> str:
    """Exclusive end of the half-open interval [value, value + 1 day)."""
    return format_day(parse_day(value) + timedelta(days=1))


def iter_days(start: str, end: str) -> Iterator[str]:
    """Every day from start to end, both inclusive. Empty if end < start."""
    current = parse_day(start)
    last = parse_day(end)
    while current <= last:
        yield format_day(current)
        current += timedelta(days=1)


def _day_part(value: Optional[str]) -> Optional[str]:
    """Leading YYYY-MM-DD of a date or timestamp string."""
    if not value:
        return None
    head = str(value).strip()[:10]
    return head if is_iso_day(head) else None


def effective_date_string(received_date: Optional[str], date_received: Optional[str] = None) -> Optional[str]:
    """
    Day an upload counts under: the database received_date first, then the
    extractor's date_received. None when neither is a usable date.
    """
    return _day_part(received_date) or _day_part(date_received)


def today_string(now: Optional[datetime] = None) -> str:
    return format_day((now or datetime.now()).date())
