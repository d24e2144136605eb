# lyfez/activities/datetime_utils.py
"""
Centralized date handling for submissions and the calendar.

Submissions are keyed by calendar day, not by timestamp. Every "what day
is it" question goes through ``today()`` so tests can pin it.
"""
import calendar
import re
from datetime import date, datetime
from typing import List, Optional

from django.utils import timezone

from core.exceptions import ValidationError

DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def now() -> datetime:
    """
    Get current datetime (timezone-aware when USE_TZ=True).
    """
    return timezone.now()


def today() -> date:
    """The current calendar day, used as the key for new submissions."""
    return now().date()


def format_day(day: Optional[date]) -> Optional[str]:
    """ISO day key (YYYY-MM-DD) for API responses."""
    if day is None:
        return None
    return day.isoformat()


def parse_day(value: str) -> date:
    """
    Parse a YYYY-MM-DD day key.

    Raises ValidationError on anything else, including impossible dates.
    """
    if not value or not DAY_KEY_RE.match(value):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")


def parse_year_month(year, month):
    """Validate ``year``/``month`` query params and return them as ints."""
    if year in (None, "") or month in (None, ""):
        raise ValidationError("Year and month required")
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError("Year and month must be integers")

    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1 <= year <= 9999:
        raise ValidationError("Year out of range")
    return year, month


def month_days(year: int, month: int) -> List[date]:
    """Every calendar day of the given month, in order."""
    _, last = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, last + 1)]
