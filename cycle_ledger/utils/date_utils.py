"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, TypeVar

from cycle_ledger.domain.exceptions import InvalidTimeframeError, MalformedDateError
from cycle_ledger.domain.models import TIMEFRAMES

T = TypeVar("T")

DISPLAY_FORMAT = "%d/%m/%Y"


def parse_record_date(value) -> date:
    """Parse a record date from a date, 'dd/mm/yyyy' or 'yyyy-mm-dd'"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedDateError(f"Unsupported date value: {value!r}")

    text = value.strip()
    for fmt in (DISPLAY_FORMAT, "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise MalformedDateError(f"Malformed date: {value!r}")


def format_record_date(value: date) -> str:
    """Format a date the way records display it (dd/mm/yyyy)"""
    return value.strftime(DISPLAY_FORMAT)


def display_label(value: date) -> str:
    """Short chart label (dd/mm)"""
    return value.strftime("%d/%m")


def is_within_timeframe(value: date, timeframe: str, today: Optional[date] = None) -> bool:
    """
    Check whether a record date falls in a reporting period.

    - daily: same day as today
    - weekly: on or after today minus 7 days
    - monthly: same calendar month and year
    - all: always
    """
    if timeframe not in TIMEFRAMES:
        raise InvalidTimeframeError(f"Unknown timeframe: {timeframe}")
    if today is None:
        today = date.today()

    if timeframe == "daily":
        return value == today
    if timeframe == "weekly":
        return value >= today - timedelta(days=7)
    if timeframe == "monthly":
        return value.month == today.month and value.year == today.year
    return True


def filter_by_timeframe(records: Iterable[T], timeframe: str, today: Optional[date] = None) -> List[T]:
    """Keep records (anything with a .date) inside the timeframe"""
    if timeframe not in TIMEFRAMES:
        raise InvalidTimeframeError(f"Unknown timeframe: {timeframe}")
    if today is None:
        today = date.today()
    return [r for r in records if is_within_timeframe(r.date, timeframe, today)]
