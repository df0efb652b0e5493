"""
Booking persistence over SQLAlchemy.
Enforces that at most one active booking occupies a (date, time) slot.
"""
import logging
import threading
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.utils_datetime import get_current_datetime
from db.models_sqlalchemy import Booking
from domain.enums import BookingStatus
from domain.models import BookingCreate, BookingRecord
from services.exceptions import ConflictError, NotFoundError


logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = {
    "service", "service_kind", "date", "time", "customer_name",
    "phone", "email", "notes", "status",
}


def _column_value(value: Any) -> Any:
    """Enums are stored by value."""
    return getattr(value, "value", value)


class BookingStore:
    """CRUD access to booking records."""

    # Serializes writes from every store instance in this process
    _write_lock = threading.RLock()

    def __init__(self, db_session: Session, clock: Callable[[], datetime] = get_current_datetime):
        """
        Initialize the booking store.

        Args:
            db_session: SQLAlchemy database session
            clock: Source of the created_at/updated_at timestamps
        """
        self.db = db_session
        self.clock = clock

    def _to_record(self, booking: Booking) -> BookingRecord:
        return BookingRecord.model_validate(booking)

    def _get_row(self, booking_id: int) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError(booking_id)
        return booking

    def _find_active_at(
        self,
        booking_date: date,
        time: str,
        exclude_booking_id: Optional[int] = None,
    ) -> Optional[Booking]:
        query = select(Booking).where(
            Booking.date == booking_date,
            Booking.time == time,
            Booking.status != BookingStatus.CANCELLED.value,
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        return self.db.scalars(query).first()

    def _commit(self, booking_date: date, time: str) -> None:
        """Commit, translating a unique-slot violation into ConflictError."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Slot collision at write time: {booking_date} {time}")
            raise ConflictError(booking_date, time) from e
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def list(self, status: Optional[BookingStatus] = None) -> List[BookingRecord]:
        """
        List bookings in chronological slot order.

        Args:
            status: Only return bookings with this status

        Returns:
            List of BookingRecord objects
        """
        query = select(Booking)
        if status is not None:
            query = query.where(Booking.status == _column_value(status))
        query = query.order_by(Booking.date, Booking.time, Booking.id)
        return [self._to_record(b) for b in self.db.scalars(query)]

    def get(self, booking_id: int) -> BookingRecord:
        """
        Get a booking by ID.

        Raises:
            NotFoundError: If booking not found
        """
        return self._to_record(self._get_row(booking_id))

    def list_by_date_range(self, start: date, end: date) -> List[BookingRecord]:
        """List bookings with start <= date <= end, in slot order."""
        query = (
            select(Booking)
            .where(Booking.date >= start, Booking.date <= end)
            .order_by(Booking.date, Booking.time, Booking.id)
        )
        return [self._to_record(b) for b in self.db.scalars(query)]

    def booked_times(self, booking_date: date) -> Set[str]:
        """Times held by active bookings on a date."""
        query = select(Booking.time).where(
            Booking.date == booking_date,
            Booking.status != BookingStatus.CANCELLED.value,
        )
        return set(self.db.scalars(query))

    def insert(
        self,
        booking: BookingCreate,
        status: BookingStatus = BookingStatus.CONFIRMED,
    ) -> BookingRecord:
        """
        Store a new booking.

        Returns:
            Stored BookingRecord with id and created_at assigned

        Raises:
            ConflictError: If an active booking already holds the slot
        """
        with self._write_lock:
            if status.is_active and self._find_active_at(booking.date, booking.time):
                logger.warning(f"Booking conflict: {booking.date} {booking.time} already taken")
                raise ConflictError(booking.date, booking.time)

            row = Booking(
                **{k: _column_value(v) for k, v in booking.model_dump().items()},
                status=status.value,
                created_at=self.clock(),
            )
            self.db.add(row)
            self._commit(booking.date, booking.time)
            self.db.refresh(row)

        logger.info(f"Stored booking {row.id} at {row.date} {row.time}")
        return self._to_record(row)

    def update(self, booking_id: int, fields: Mapping[str, Any]) -> BookingRecord:
        """
        Update an existing booking.

        Moving a booking to another date or time, or re-activating a
        cancelled one, re-checks the slot against all other bookings.

        Raises:
            NotFoundError: If booking not found
            ConflictError: If the target slot is held by another active booking
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self._write_lock:
            row = self._get_row(booking_id)

            new_date = fields.get("date") or row.date
            new_time = fields.get("time") or row.time
            old_status = BookingStatus(row.status)
            new_status = BookingStatus(fields.get("status") or old_status)

            slot_changed = (new_date, new_time) != (row.date, row.time)
            reactivated = not old_status.is_active and new_status.is_active
            if new_status.is_active and (slot_changed or reactivated):
                if self._find_active_at(new_date, new_time, exclude_booking_id=booking_id):
                    logger.warning(
                        f"Update conflict for booking {booking_id}: {new_date} {new_time} already taken"
                    )
                    raise ConflictError(new_date, new_time)

            for key, value in fields.items():
                setattr(row, key, _column_value(value))
            row.updated_at = self.clock()

            self._commit(new_date, new_time)
            self.db.refresh(row)

        logger.info(f"Updated booking {booking_id}")
        return self._to_record(row)

    def delete(self, booking_id: int) -> BookingRecord:
        """
        Permanently delete a booking.

        Returns:
            The record as it was before deletion

        Raises:
            NotFoundError: If booking not found
        """
        with self._write_lock:
            row = self._get_row(booking_id)
            record = self._to_record(row)
            self.db.delete(row)
            try:
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                raise

        logger.info(f"Deleted booking {booking_id}")
        return record
