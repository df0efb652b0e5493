"""
Booking service for the barbershop.
Resolves availability, validates and commits bookings, and signals
booking events to the notification dispatcher.
"""
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Mapping, Optional, Union

from core.availability_policy import AvailabilityPolicy
from core.logging import booking_extra
from core.utils_datetime import get_current_datetime, parse_iso_date, to_business_time
from domain.enums import (
    BookingStatus,
    DayStatus,
    NotificationEvent,
    SERVICE_PRICES,
)
from domain.models import BookingRecord, BookingStatistics, DaySummary, MonthOverview
from services.booking_store import BookingStore
from services.booking_validation import validate_booking_input, validate_booking_update
from services.exceptions import ConflictError, SlotUnavailableError, ValidationError
from services.notifications import NotificationDispatcher
from services.slot_generator import generate_slots


logger = logging.getLogger(__name__)

DateLike = Union[str, date]


def _parse_date(value: DateLike, field: str = "date") -> date:
    """Parse a caller-supplied date, reporting a bad value as a field error."""
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError({field: str(e)}) from e


class BookingService:
    """Service for availability queries and booking management."""

    def __init__(
        self,
        store: BookingStore,
        policy: AvailabilityPolicy,
        notifier: Optional[NotificationDispatcher] = None,
        clock: Callable[[], datetime] = get_current_datetime,
    ):
        """
        Initialize the booking service.

        Args:
            store: Booking persistence
            policy: Opening-hours rules
            notifier: Receives created/cancelled/reminder events; optional
            clock: Current time source, used for the "today" cutoff
        """
        self.store = store
        self.policy = policy
        self.notifier = notifier
        self.clock = clock

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def _now(self) -> datetime:
        return to_business_time(self.clock())

    def _open_slots(self, booking_date: date, now: datetime) -> List[str]:
        """Policy slots for a date that are still in the future."""
        today = now.date()
        if booking_date < today or not self.policy.is_within_horizon(booking_date, today):
            return []

        slots = generate_slots(self.policy.resolve_hours(booking_date), self.policy.lunch_break)
        if booking_date == today:
            cutoff = now.strftime('%H:%M')
            slots = [slot for slot in slots if slot >= cutoff]
        return slots

    def get_available_slots(self, booking_date: DateLike) -> List[str]:
        """
        Get free slots for a date in chronological order.

        Empty when the shop is closed, the date is past or beyond the
        booking horizon, or every slot is taken. Slots of today that have
        already started are left out.

        Raises:
            ValidationError: If the date is not a valid YYYY-MM-DD date
        """
        booking_date = _parse_date(booking_date)
        slots = self._open_slots(booking_date, self._now())
        if not slots:
            return []
        booked = self.store.booked_times(booking_date)
        return [slot for slot in slots if slot not in booked]

    def get_day_summary(self, booking_date: DateLike) -> DaySummary:
        """Summarize a day for the calendar: slot counts, free slots and status."""
        booking_date = _parse_date(booking_date)
        now = self._now()
        hours = self.policy.resolve_hours(booking_date)
        all_slots = generate_slots(hours, self.policy.lunch_break)
        booked = self.store.booked_times(booking_date) if all_slots else set()
        booked_count = len(booked.intersection(all_slots))

        if booking_date < now.date():
            status = DayStatus.PAST
        elif hours is None or not self.policy.is_within_horizon(booking_date, now.date()):
            status = DayStatus.CLOSED
        elif booked_count == 0:
            status = DayStatus.AVAILABLE
        elif booked_count >= len(all_slots):
            status = DayStatus.BOOKED
        else:
            status = DayStatus.PARTIAL

        free = []
        if status in (DayStatus.AVAILABLE, DayStatus.PARTIAL):
            free = [slot for slot in self._open_slots(booking_date, now) if slot not in booked]

        return DaySummary(
            date=booking_date,
            status=status,
            total_slots=len(all_slots),
            booked_slots=booked_count,
            available_slots=len(free),
            slots=free,
        )

    def get_month_overview(self, year: int, month: int) -> MonthOverview:
        """Day summaries for every day of a month."""
        if not 1 <= month <= 12:
            raise ValidationError({"month": f"Month must be 1..12, got {month}"})
        _, days_in_month = calendar.monthrange(year, month)
        days = [
            self.get_day_summary(date(year, month, day))
            for day in range(1, days_in_month + 1)
        ]
        return MonthOverview(year=year, month=month, days=days)

    # ------------------------------------------------------------------
    # Booking lifecycle
    # ------------------------------------------------------------------

    def _notify(self, booking: BookingRecord, event: NotificationEvent) -> None:
        """Hand a booking event to the dispatcher; delivery failures are only logged."""
        if self.notifier is None:
            return
        try:
            self.notifier.dispatch(booking, event)
        except Exception:
            logger.exception(
                f"Notification '{event.value}' failed for booking {booking.id}",
                extra=booking_extra(booking, event),
            )

    def create_booking(self, data: Mapping[str, Any]) -> BookingRecord:
        """
        Create a new booking.

        Args:
            data: service, date, time, customer_name (or name), email, phone,
                and optionally service_kind and notes

        Returns:
            Stored BookingRecord with status confirmed

        Raises:
            ValidationError: If fields are missing or malformed
            SlotUnavailableError: If the slot is not currently offered or is taken
        """
        booking = validate_booking_input(data)

        if booking.time not in self.get_available_slots(booking.date):
            logger.warning(f"Requested slot not available: {booking.date} {booking.time}")
            raise SlotUnavailableError(booking.date, booking.time)

        try:
            record = self.store.insert(booking)
        except ConflictError as e:
            # Taken between the availability check and the write
            raise SlotUnavailableError(booking.date, booking.time, reason="already booked") from e

        logger.info(
            f"Created booking {record.id} for {record.customer_name} at {record.date} {record.time}",
            extra=booking_extra(record, NotificationEvent.CREATED),
        )
        self._notify(record, NotificationEvent.CREATED)
        return record

    def get_booking(self, booking_id: int) -> BookingRecord:
        """
        Get a booking by ID.

        Raises:
            NotFoundError: If booking not found
        """
        return self.store.get(booking_id)

    def list_bookings(self, status: Optional[BookingStatus] = None) -> List[BookingRecord]:
        """All bookings, most recent slot first, as shown in the admin table."""
        bookings = self.store.list(status=status)
        return sorted(bookings, key=lambda b: (b.date, b.time, b.id), reverse=True)

    def get_bookings_by_date_range(self, start: DateLike, end: DateLike) -> List[BookingRecord]:
        """Bookings with start <= date <= end."""
        return self.store.list_by_date_range(_parse_date(start, "start"), _parse_date(end, "end"))

    def update_booking(self, booking_id: int, updates: Mapping[str, Any]) -> BookingRecord:
        """
        Update booking details.

        A pending booking that is updated without an explicit status
        becomes confirmed.

        Raises:
            ValidationError: If a provided field is malformed
            NotFoundError: If booking not found
            ConflictError: If the new slot is held by another active booking
        """
        fields = validate_booking_update(updates)

        if "status" not in fields:
            current = self.store.get(booking_id)
            if current.status == BookingStatus.PENDING:
                fields["status"] = BookingStatus.CONFIRMED

        record = self.store.update(booking_id, fields)
        logger.info(f"Updated booking {booking_id}: {sorted(fields)}", extra=booking_extra(record))

        if "status" in fields and record.status == BookingStatus.CANCELLED:
            self._notify(record, NotificationEvent.CANCELLED)
        return record

    def cancel_booking(self, booking_id: int) -> BookingRecord:
        """
        Cancel a booking, keeping the record and freeing its slot.

        Raises:
            NotFoundError: If booking not found
        """
        record = self.store.update(booking_id, {"status": BookingStatus.CANCELLED})
        logger.info(f"Cancelled booking {booking_id}", extra=booking_extra(record, NotificationEvent.CANCELLED))
        self._notify(record, NotificationEvent.CANCELLED)
        return record

    def delete_booking(self, booking_id: int) -> None:
        """
        Permanently delete a booking.

        Raises:
            NotFoundError: If booking not found
        """
        record = self.store.delete(booking_id)
        if record.is_active:
            self._notify(record, NotificationEvent.CANCELLED)

    def search(self, query: str) -> List[BookingRecord]:
        """
        Find bookings whose name, email, phone or service contains the query.

        Matching is case-insensitive; an empty query returns every booking.
        """
        needle = (query or "").strip().lower()
        bookings = self.list_bookings()
        if not needle:
            return bookings
        return [
            b for b in bookings
            if needle in b.customer_name.lower()
            or needle in b.email.lower()
            or needle in b.phone.lower()
            or needle in b.service.lower()
        ]

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def get_statistics(self) -> BookingStatistics:
        """Dashboard figures over active bookings."""
        today = self._now().date()
        active = [b for b in self.store.list() if b.is_active]
        revenue = sum(SERVICE_PRICES.get(b.service_kind, 0) for b in active)
        return BookingStatistics(
            total_bookings=len(active),
            today_bookings=sum(1 for b in active if b.date == today),
            upcoming_bookings=sum(1 for b in active if b.date >= today),
            total_revenue=revenue,
        )

    def send_daily_reminders(self) -> int:
        """
        Send a reminder for every active booking of tomorrow.

        Returns:
            Number of reminders handed to the dispatcher
        """
        tomorrow = self._now().date() + timedelta(days=1)
        bookings = [b for b in self.store.list_by_date_range(tomorrow, tomorrow) if b.is_active]
        for booking in bookings:
            self._notify(booking, NotificationEvent.REMINDER)
        logger.info(f"Sent {len(bookings)} reminders for {tomorrow.isoformat()}")
        return len(bookings)
