"""Date and submission period helpers shared by validators."""

from __future__ import annotations

import re
from datetime import date
from typing import Optional, Tuple


MONTH_ABBREVIATIONS = [
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

DISPLAY_DATE_FORMAT = "%d/%m/%Y"

_PERIOD_RE = re.compile(r"^([A-Za-z]{3})-(\d{4})$")

# Month arithmetic around a period stays inside datetime.date
MIN_PERIOD_YEAR = 1900
MAX_PERIOD_YEAR = 9998

YearMonth = Tuple[int, int]


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string, returning ``None`` when it is not a date."""

    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_submission_period(value: Optional[str]) -> Optional[YearMonth]:
    """Parse ``MMM-YYYY`` (any case) into ``(year, month)``.

    Years outside ``MIN_PERIOD_YEAR``..``MAX_PERIOD_YEAR`` are rejected.
    """

    if value is None:
        return None
    match = _PERIOD_RE.match(value.strip())
    if not match:
        return None
    abbreviation = match.group(1).upper()
    if abbreviation not in MONTH_ABBREVIATIONS:
        return None
    year = int(match.group(2))
    if not MIN_PERIOD_YEAR <= year <= MAX_PERIOD_YEAR:
        return None
    return year, MONTH_ABBREVIATIONS.index(abbreviation) + 1


def format_submission_period(period: YearMonth) -> str:
    year, month = period
    return f"{MONTH_ABBREVIATIONS[month - 1]}-{year}"


def format_month_name(period: YearMonth) -> str:
    year, month = period
    return f"{MONTH_NAMES[month - 1]} {year}"


def add_months(period: YearMonth, months: int) -> YearMonth:
    year, month = period
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def twentieth_of_following_month(period: YearMonth) -> date:
    year, month = add_months(period, 1)
    return date(year, month, 20)


def add_months_to_date(value: date, months: int) -> date:
    """Shift *value* by whole months, clamping the day to the target month."""

    year, month = add_months((value.year, value.month), months)
    day = min(value.day, _days_in_month(year, month))
    return date(year, month, day)


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def _days_in_month(year: int, month: int) -> int:
    next_year, next_month = add_months((year, month), 1)
    return (date(next_year, next_month, 1) - date(year, month, 1)).days
