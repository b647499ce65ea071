from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_period(value: str) -> tuple[int, int]:
    """Parse a billing period (YYYY-MM) into (year, month)."""
    m = _PERIOD_RE.match((value or "").strip())
    if not m:
        raise ValidationError(f"Invalid period {value!r}, expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid period {value!r}, month must be 01-12")
    return year, month


def period_of(day: date) -> str:
    return day.strftime("%Y-%m")


def period_bounds(period: str) -> tuple[date, date]:
    """First and last calendar day of the period (inclusive)."""
    year, month = parse_period(period)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def days_in_period(period: str) -> int:
    year, month = parse_period(period)
    return calendar.monthrange(year, month)[1]


def first_day_of_next_period(period: str) -> date:
    year, month = parse_period(period)
    if month == 12:
        return date(year + 1, 1, 1)
    return date(year, month + 1, 1)
