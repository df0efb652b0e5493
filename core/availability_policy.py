"""
Availability policy for the barbershop: holidays, weekly closures,
special opening hours, weekend hours and the optional lunch break.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from core.config import settings
from core.utils_datetime import parse_iso_date, sunday_based_weekday


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoursWindow:
    """Operating hours as whole hours, start inclusive and end exclusive."""
    start: int
    end: int

    def __post_init__(self):
        for bound in (self.start, self.end):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise ValueError(f"Opening hours must be whole hours, got {bound!r}")
        if not (0 <= self.start < self.end <= 24):
            raise ValueError(
                f"Invalid hours window {self.start}-{self.end}: "
                f"expected 0 <= start < end <= 24"
            )

    def contains_hour(self, hour: int) -> bool:
        """Check if an hour falls inside [start, end)."""
        return self.start <= hour < self.end

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HoursWindow':
        """Create a window from a {"start": .., "end": ..} mapping."""
        try:
            return cls(start=data["start"], end=data["end"])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Hours object must have integer 'start' and 'end': {data!r}") from e

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class AvailabilityPolicy:
    """
    Opening-hours rules for every calendar date.

    Precedence: closed days / closed weekdays, then special hours,
    then weekend hours, then default hours.
    """
    default_hours: HoursWindow = field(default_factory=lambda: HoursWindow(10, 19))

    # Full-day closures (holidays)
    closed_days: FrozenSet[date] = field(default_factory=frozenset)

    # Weekdays closed every week, 0 = Sunday .. 6 = Saturday
    closed_weekdays: FrozenSet[int] = field(default_factory=frozenset)

    # Per-date overrides
    special_hours: Mapping[date, HoursWindow] = field(default_factory=dict)

    # Per-weekday hours, 0 = Sunday .. 6 = Saturday
    weekend_hours: Mapping[int, HoursWindow] = field(default_factory=dict)

    lunch_break: Optional[HoursWindow] = None

    # How many days ahead slots are offered; None means unlimited
    booking_horizon_days: Optional[int] = None

    def __post_init__(self):
        for weekday in set(self.closed_weekdays) | set(self.weekend_hours):
            if not 0 <= weekday <= 6:
                raise ValueError(f"Weekday index must be 0 (Sunday) .. 6 (Saturday), got {weekday}")

        # Read-only views over private copies
        object.__setattr__(self, "closed_days", frozenset(self.closed_days))
        object.__setattr__(self, "closed_weekdays", frozenset(self.closed_weekdays))
        object.__setattr__(self, "special_hours", MappingProxyType(dict(self.special_hours)))
        object.__setattr__(self, "weekend_hours", MappingProxyType(dict(self.weekend_hours)))

    def __hash__(self) -> int:
        return hash((
            self.default_hours,
            self.closed_days,
            self.closed_weekdays,
            frozenset(self.special_hours.items()),
            frozenset(self.weekend_hours.items()),
            self.lunch_break,
            self.booking_horizon_days,
        ))

    def is_closed(self, check_date: date) -> bool:
        """Check if the shop is closed for the whole day."""
        if check_date in self.closed_days:
            return True
        return sunday_based_weekday(check_date) in self.closed_weekdays

    def resolve_hours(self, check_date: date) -> Optional[HoursWindow]:
        """
        Get operating hours for a specific date.

        Returns:
            HoursWindow for the date, or None if closed
        """
        if self.is_closed(check_date):
            return None

        if check_date in self.special_hours:
            return self.special_hours[check_date]

        weekday = sunday_based_weekday(check_date)
        if weekday in self.weekend_hours:
            return self.weekend_hours[weekday]

        return self.default_hours

    def is_open_on_date(self, check_date: date) -> bool:
        """Check if the shop is open on a date."""
        return self.resolve_hours(check_date) is not None

    def is_within_horizon(self, check_date: date, today: date) -> bool:
        """Check that a date is not too far ahead of today."""
        if self.booking_horizon_days is None:
            return True
        return check_date <= today + timedelta(days=self.booking_horizon_days)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AvailabilityPolicy':
        """
        Build a policy from a JSON-style document.

        Accepts both the camelCase keys of the shop calendar file
        (closedDays, specialHours, ...) and snake_case keys.
        """
        def pick(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        default_hours = pick("defaultHours", "default_hours")
        lunch_break = pick("lunchBreak", "lunch_break")
        horizon = pick("bookingHorizonDays", "booking_horizon_days")

        return cls(
            default_hours=HoursWindow.from_dict(default_hours) if default_hours else HoursWindow(10, 19),
            closed_days=frozenset(parse_iso_date(d) for d in pick("closedDays", "closed_days", [])),
            closed_weekdays=frozenset(int(d) for d in pick("closedWeekdays", "closed_weekdays", [])),
            special_hours={
                parse_iso_date(d): HoursWindow.from_dict(hours)
                for d, hours in pick("specialHours", "special_hours", {}).items()
            },
            weekend_hours={
                int(weekday): HoursWindow.from_dict(hours)
                for weekday, hours in pick("weekendHours", "weekend_hours", {}).items()
            },
            lunch_break=HoursWindow.from_dict(lunch_break) if lunch_break else None,
            booking_horizon_days=int(horizon) if horizon is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase calendar document format."""
        return {
            "closedDays": sorted(d.isoformat() for d in self.closed_days),
            "closedWeekdays": sorted(self.closed_weekdays),
            "specialHours": {
                d.isoformat(): hours.to_dict()
                for d, hours in sorted(self.special_hours.items())
            },
            "weekendHours": {
                str(weekday): hours.to_dict()
                for weekday, hours in sorted(self.weekend_hours.items())
            },
            "defaultHours": self.default_hours.to_dict(),
            "lunchBreak": self.lunch_break.to_dict() if self.lunch_break else None,
            "bookingHorizonDays": self.booking_horizon_days,
        }


def load_availability_policy(path: Union[str, Path]) -> AvailabilityPolicy:
    """
    Load an availability policy from a JSON file.

    Raises:
        ValueError: If the file contains invalid hours or dates
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    policy = AvailabilityPolicy.from_dict(data)
    logger.info(
        f"Loaded availability policy from {path}: "
        f"{len(policy.closed_days)} closed days, {len(policy.special_hours)} special dates"
    )
    return policy


def get_default_availability_policy() -> AvailabilityPolicy:
    """Get the shop's built-in calendar."""
    closed_days = frozenset({
        date(2026, 12, 24),  # Christmas Eve
        date(2026, 12, 25),  # Christmas
        date(2026, 12, 26),  # Boxing Day
        date(2027, 1, 1),    # New Year
    })

    special_hours = {
        date(2026, 2, 15): HoursWindow(12, 17),   # Shortened day
        date(2026, 12, 23): HoursWindow(10, 15),  # Closes early before Christmas
        date(2026, 12, 31): HoursWindow(10, 16),  # New Year's Eve
    }

    return AvailabilityPolicy(
        default_hours=HoursWindow(10, 19),
        closed_days=closed_days,
        closed_weekdays=frozenset({0}),  # Sunday
        special_hours=special_hours,
        weekend_hours={6: HoursWindow(9, 16)},  # Saturday
        lunch_break=None,
        booking_horizon_days=settings.booking_horizon_days,
    )


# Singleton instance
_availability_policy_instance: Optional[AvailabilityPolicy] = None


def get_availability_policy() -> AvailabilityPolicy:
    """Get the availability policy singleton, loaded once per process."""
    global _availability_policy_instance
    if _availability_policy_instance is None:
        if settings.availability_file:
            _availability_policy_instance = load_availability_policy(settings.availability_file)
        else:
            _availability_policy_instance = get_default_availability_policy()
    return _availability_policy_instance
