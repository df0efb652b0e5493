"""
Tests for the availability policy.
Covers hours precedence, weekday indexing, loading and validation.
"""

import json
import pytest
from datetime import date

from core.availability_policy import (
    AvailabilityPolicy,
    HoursWindow,
    get_default_availability_policy,
    load_availability_policy,
)
from core.utils_datetime import sunday_based_weekday


@pytest.mark.unit
class TestHoursWindow:
    """Tests for the hours value object."""

    def test_valid_window(self):
        """Test a normal window keeps its bounds."""
        window = HoursWindow(10, 19)
        assert window.start == 10
        assert window.end == 19

    @pytest.mark.parametrize("start,end", [(19, 10), (12, 12), (-1, 10), (10, 25)])
    def test_invalid_window_rejected(self, start, end):
        """Test start must be before end and both within the day."""
        with pytest.raises(ValueError):
            HoursWindow(start, end)

    def test_contains_hour_end_exclusive(self):
        """Test the end hour is outside the window."""
        window = HoursWindow(13, 14)
        assert window.contains_hour(13)
        assert not window.contains_hour(12)
        assert not window.contains_hour(14)

    def test_from_dict_missing_key(self):
        """Test a window without 'end' is rejected."""
        with pytest.raises(ValueError):
            HoursWindow.from_dict({"start": 10})

    @pytest.mark.parametrize("start,end", [(10.5, 19), (10, 18.5), ("10", 19), (True, 19)])
    def test_from_dict_non_integer_hours(self, start, end):
        """Test fractional or non-numeric hours are rejected, not truncated."""
        with pytest.raises(ValueError):
            HoursWindow.from_dict({"start": start, "end": end})


@pytest.mark.unit
class TestResolveHours:
    """Tests for hours precedence."""

    def test_sunday_is_weekday_zero(self):
        """Test weekday indexing starts at Sunday."""
        assert sunday_based_weekday(date(2026, 3, 1)) == 0   # Sunday
        assert sunday_based_weekday(date(2026, 3, 7)) == 6   # Saturday
        assert sunday_based_weekday(date(2026, 3, 10)) == 2  # Tuesday

    def test_default_hours(self, shop_policy):
        """Test an ordinary weekday uses the default hours."""
        assert shop_policy.resolve_hours(date(2026, 3, 10)) == HoursWindow(10, 19)

    def test_closed_day(self, shop_policy):
        """Test a holiday is closed."""
        assert shop_policy.resolve_hours(date(2026, 12, 25)) is None
        assert shop_policy.is_closed(date(2026, 12, 25))

    def test_closed_weekday(self, shop_policy):
        """Test every Sunday is closed."""
        assert shop_policy.resolve_hours(date(2026, 3, 8)) is None
        assert not shop_policy.is_open_on_date(date(2026, 3, 15))

    def test_weekend_hours(self, shop_policy):
        """Test Saturday hours replace the default hours."""
        assert shop_policy.resolve_hours(date(2026, 3, 7)) == HoursWindow(9, 16)

    def test_special_hours_override_weekend_hours(self, shop_policy):
        """Test a special date wins over the Saturday hours."""
        assert shop_policy.resolve_hours(date(2026, 3, 14)) == HoursWindow(12, 15)

    def test_special_hours_override_default_hours(self, shop_policy):
        """Test a special date wins over the default hours."""
        assert shop_policy.resolve_hours(date(2026, 3, 11)) == HoursWindow(14, 17)

    def test_closed_day_overrides_special_hours(self):
        """Test a closure wins even when the date also has special hours."""
        policy = AvailabilityPolicy(
            closed_days=frozenset({date(2026, 3, 10)}),
            special_hours={date(2026, 3, 10): HoursWindow(12, 14)},
        )
        assert policy.resolve_hours(date(2026, 3, 10)) is None

    def test_closed_weekday_overrides_weekend_hours(self):
        """Test a closed weekday wins over its weekend hours."""
        policy = AvailabilityPolicy(
            closed_weekdays=frozenset({6}),
            weekend_hours={6: HoursWindow(9, 16)},
        )
        assert policy.resolve_hours(date(2026, 3, 7)) is None

    def test_invalid_weekday_index(self):
        """Test weekday indices outside 0..6 are rejected."""
        with pytest.raises(ValueError):
            AvailabilityPolicy(closed_weekdays=frozenset({7}))

    def test_policy_is_read_only(self, shop_policy):
        """Test loaded hours cannot be changed after construction."""
        with pytest.raises(TypeError):
            shop_policy.special_hours[date(2026, 3, 10)] = HoursWindow(8, 9)
        with pytest.raises(TypeError):
            shop_policy.weekend_hours[0] = HoursWindow(8, 9)

    def test_source_dict_changes_do_not_leak(self):
        """Test the policy keeps its own copy of the hours mappings."""
        special = {date(2026, 3, 10): HoursWindow(12, 14)}
        policy = AvailabilityPolicy(special_hours=special)

        special[date(2026, 3, 11)] = HoursWindow(8, 9)

        assert date(2026, 3, 11) not in policy.special_hours

    def test_policy_hashable(self, shop_policy):
        """Test equal policies hash equally."""
        copy = AvailabilityPolicy.from_dict(shop_policy.to_dict())
        assert hash(copy) == hash(shop_policy)
        assert len({shop_policy, copy}) == 1

    def test_horizon(self):
        """Test dates beyond the horizon are reported outside it."""
        policy = AvailabilityPolicy(booking_horizon_days=7)
        today = date(2026, 3, 1)
        assert policy.is_within_horizon(date(2026, 3, 8), today)
        assert not policy.is_within_horizon(date(2026, 3, 9), today)
        assert AvailabilityPolicy().is_within_horizon(date(2030, 1, 1), today)


@pytest.mark.unit
class TestPolicyLoading:
    """Tests for building policies from calendar documents."""

    def test_from_camel_case_document(self):
        """Test the shop calendar file format."""
        policy = AvailabilityPolicy.from_dict({
            "closedDays": ["2026-12-25"],
            "closedWeekdays": [0],
            "specialHours": {"2026-02-15": {"start": 12, "end": 17}},
            "weekendHours": {"6": {"start": 9, "end": 16}},
            "defaultHours": {"start": 10, "end": 19},
            "lunchBreak": {"start": 13, "end": 14},
        })
        assert date(2026, 12, 25) in policy.closed_days
        assert policy.closed_weekdays == frozenset({0})
        assert policy.special_hours[date(2026, 2, 15)] == HoursWindow(12, 17)
        assert policy.weekend_hours[6] == HoursWindow(9, 16)
        assert policy.lunch_break == HoursWindow(13, 14)

    def test_from_snake_case_document(self):
        """Test snake_case keys are accepted."""
        policy = AvailabilityPolicy.from_dict({
            "default_hours": {"start": 9, "end": 17},
            "booking_horizon_days": 30,
        })
        assert policy.default_hours == HoursWindow(9, 17)
        assert policy.booking_horizon_days == 30
        assert policy.lunch_break is None

    def test_invalid_date_rejected(self):
        """Test malformed closed days fail at load time."""
        with pytest.raises(ValueError):
            AvailabilityPolicy.from_dict({"closedDays": ["25/12/2026"]})

    def test_to_dict_round_trip(self, shop_policy):
        """Test a serialized policy loads back to the same rules."""
        assert AvailabilityPolicy.from_dict(shop_policy.to_dict()) == shop_policy

    def test_load_from_file(self, tmp_path):
        """Test loading a JSON calendar file."""
        path = tmp_path / "availability.json"
        path.write_text(json.dumps({
            "closedDays": ["2026-12-24"],
            "defaultHours": {"start": 8, "end": 12},
        }), encoding="utf-8")

        policy = load_availability_policy(path)

        assert policy.resolve_hours(date(2026, 12, 24)) is None
        assert policy.resolve_hours(date(2026, 12, 22)) == HoursWindow(8, 12)

    def test_load_fractional_hours_from_file(self, tmp_path):
        """Test a half-hour boundary in the file is rejected."""
        path = tmp_path / "availability.json"
        path.write_text(json.dumps({"defaultHours": {"start": 10.5, "end": 19}}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_availability_policy(path)

    def test_load_invalid_hours_from_file(self, tmp_path):
        """Test a file with start >= end is rejected."""
        path = tmp_path / "availability.json"
        path.write_text(json.dumps({"defaultHours": {"start": 19, "end": 10}}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_availability_policy(path)

    def test_default_calendar(self):
        """Test the built-in shop calendar."""
        policy = get_default_availability_policy()
        assert policy.resolve_hours(date(2026, 12, 24)) is None
        assert policy.resolve_hours(date(2027, 1, 1)) is None
        assert policy.resolve_hours(date(2026, 12, 31)) == HoursWindow(10, 16)
        assert policy.resolve_hours(date(2026, 3, 8)) is None        # Sunday
        assert policy.resolve_hours(date(2026, 3, 7)) == HoursWindow(9, 16)
        assert policy.resolve_hours(date(2026, 3, 10)) == HoursWindow(10, 19)
        assert policy.lunch_break is None
