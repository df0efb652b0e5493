"""Booking errors surfaced by the store and the booking service."""
from datetime import date
from typing import Dict, Optional


class BookingError(Exception):
    """Base class for booking errors."""
    pass


class ValidationError(BookingError):
    """Raised when booking input is missing fields or malformed."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{name}: {message}" for name, message in sorted(self.errors.items()))
        super().__init__(f"Invalid booking data ({details})")


class SlotUnavailableError(BookingError):
    """Raised when the requested slot is not in the current availability."""

    def __init__(self, booking_date: date, time: str, reason: Optional[str] = None):
        self.date = booking_date
        self.time = time
        self.reason = reason
        message = f"Slot {booking_date.isoformat()} {time} is not available"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConflictError(BookingError):
    """Raised when another active booking already holds the slot."""

    def __init__(self, booking_date: date, time: str):
        self.date = booking_date
        self.time = time
        super().__init__(f"Slot {booking_date.isoformat()} {time} is already booked")


class NotFoundError(BookingError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: int):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")
