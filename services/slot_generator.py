"""Expansion of opening hours into bookable 30-minute slots."""
from typing import List, Optional

from core.availability_policy import HoursWindow
from core.utils_datetime import format_slot


SLOT_MINUTES = (0, 30)


def is_lunch_hour(hour: int, lunch_break: Optional[HoursWindow]) -> bool:
    """Check if an hour lies inside the lunch break [start, end)."""
    return lunch_break is not None and lunch_break.contains_hour(hour)


def generate_slots(
    hours: Optional[HoursWindow],
    lunch_break: Optional[HoursWindow] = None,
) -> List[str]:
    """
    Generate the slots of a day in chronological order.

    Every hour of the window yields an HH:00 and an HH:30 slot. Both are
    dropped when the hour is inside the lunch break; the hours right before
    and right after the break keep both of their slots.

    Args:
        hours: Opening hours, or None when the day is closed
        lunch_break: Optional break excluded from the day

    Returns:
        List of "HH:MM" slots, empty when closed
    """
    if hours is None:
        return []

    slots = []
    for hour in range(hours.start, hours.end):
        if is_lunch_hour(hour, lunch_break):
            continue
        for minute in SLOT_MINUTES:
            slots.append(format_slot(hour, minute))
    return slots
