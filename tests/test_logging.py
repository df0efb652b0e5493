"""Tests for logging configuration."""
import json
import logging
from datetime import date, datetime

import pytest

from core.config import settings
from core.logging import BookingJsonFormatter, PlainFormatter, booking_extra, build_formatter
from domain.enums import BookingStatus, NotificationEvent
from domain.models import BookingRecord


def make_record(msg="Created booking %s", args=(1,), **extra):
    record = logging.LogRecord(
        name="services.booking_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def stored_booking():
    return BookingRecord(
        id=7,
        service="Hajvágás",
        date=date(2026, 3, 10),
        time="10:00",
        customer_name="Kovács Péter",
        email="peter.kovacs@example.com",
        phone="+36 30 123 4567",
        status=BookingStatus.CONFIRMED,
        created_at=datetime(2026, 3, 1, 9, 0),
    )


@pytest.mark.unit
class TestFormatters:
    def test_plain_formatter_in_development(self):
        """Test development logs are human-readable."""
        formatter = build_formatter(use_json=False)
        assert isinstance(formatter, PlainFormatter)
        assert not isinstance(formatter, BookingJsonFormatter)

    def test_json_formatter_fields(self):
        """Test JSON records carry level, logger and service context."""
        formatter = build_formatter(use_json=True)

        payload = json.loads(formatter.format(make_record()))

        assert payload["message"] == "Created booking 1"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "services.booking_service"
        assert payload["service"]
        assert payload["timezone"] == settings.business_timezone
        assert "environment" in payload
        assert "booking" not in payload

    def test_json_groups_booking_context(self, stored_booking):
        """Test booking extras are nested under a booking object."""
        formatter = build_formatter(use_json=True)
        extra = booking_extra(stored_booking, NotificationEvent.CREATED)

        payload = json.loads(formatter.format(make_record(**extra)))

        assert payload["booking"] == {
            "id": "7",
            "event": "created",
            "date": "2026-03-10",
            "time": "10:00",
            "status": "confirmed",
        }
        assert "booking_id" not in payload
        assert "booking_event" not in payload

    def test_json_keeps_unrelated_extras(self, stored_booking):
        """Test other extras stay at the top level."""
        formatter = build_formatter(use_json=True)
        record = make_record(body="Foglalás megerősítve", **booking_extra(stored_booking))

        payload = json.loads(formatter.format(record))

        assert payload["body"] == "Foglalás megerősítve"
        assert payload["booking"]["id"] == "7"
        assert "event" not in payload["booking"]

    def test_plain_appends_booking_context(self, stored_booking):
        """Test plain lines end with the booking context when present."""
        formatter = build_formatter(use_json=False)

        line = formatter.format(make_record(**booking_extra(stored_booking, "cancelled")))

        assert line.endswith("[booking id=7 event=cancelled date=2026-03-10 time=10:00 status=confirmed]")

    def test_plain_without_booking_context(self):
        formatter = build_formatter(use_json=False)
        line = formatter.format(make_record())
        assert line.endswith("Created booking 1")


@pytest.mark.unit
class TestBookingExtra:
    def test_skips_missing_attributes(self):
        """Test objects without booking attributes give only what they have."""
        class Partial:
            id = 3

        assert booking_extra(Partial()) == {"booking_id": "3"}

    def test_service_log_carries_booking_context(self, create_sample_booking, caplog):
        """Test creating a booking logs with its id and event."""
        with caplog.at_level(logging.INFO, logger="services.booking_service"):
            booking = create_sample_booking()

        created = [r for r in caplog.records if getattr(r, "booking_event", None) == "created"]
        assert len(created) == 1
        assert created[0].booking_id == str(booking.id)
        assert created[0].booking_time == "10:00"
