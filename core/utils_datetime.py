"""
DateTime utilities for the booking calendar.
Dates and slots are plain local values in the business timezone.
"""
import re
from datetime import datetime, date, time
from typing import Union

import pytz

from core.config import settings


# Timezone configuration
TIMEZONE = pytz.timezone(settings.business_timezone)

SLOT_PATTERN = re.compile(r'^([01]\d|2[0-3]):(00|30)$')
ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def get_current_datetime() -> datetime:
    """Get current datetime in the business timezone."""
    return datetime.now(TIMEZONE)


def to_business_time(value: datetime) -> datetime:
    """
    Express a datetime in the business timezone.

    Naive datetimes are taken to already be business-local wall time.
    """
    if value.tzinfo is None:
        return TIMEZONE.localize(value)
    return value.astimezone(TIMEZONE)


def parse_iso_date(value: Union[str, date]) -> date:
    """
    Parse a YYYY-MM-DD calendar date.

    The string is read as a calendar day, never as an instant, so it cannot
    shift across a UTC boundary.

    Raises:
        ValueError: If the value is not a valid ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value.strip()):
        raise ValueError(f"Invalid date {value!r}: expected YYYY-MM-DD")
    return date.fromisoformat(value.strip())


def parse_slot_time(value: Union[str, time]) -> str:
    """
    Validate a slot value and return its canonical "HH:MM" form.

    Raises:
        ValueError: If the value is not a 30-minute slot in 24-hour format
    """
    if isinstance(value, time):
        value = value.strftime('%H:%M')
    if not isinstance(value, str):
        raise ValueError(f"Invalid time {value!r}: expected HH:MM")
    value = value.strip()
    # Accept single-digit hours such as "9:30"
    if re.match(r'^\d:\d{2}$', value):
        value = '0' + value
    if not SLOT_PATTERN.match(value):
        raise ValueError(f"Invalid time {value!r}: expected HH:MM on a 30-minute boundary")
    return value


def format_slot(hour: int, minute: int = 0) -> str:
    """Format an hour/minute pair as a zero-padded "HH:MM" slot."""
    return f"{hour:02d}:{minute:02d}"


def sunday_based_weekday(value: date) -> int:
    """Weekday index with 0 = Sunday .. 6 = Saturday."""
    return (value.weekday() + 1) % 7
