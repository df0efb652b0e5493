"""Domain enums for K2 Barber Booking."""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_active(self) -> bool:
        """Active bookings occupy their slot."""
        return self is not BookingStatus.CANCELLED


class ServiceKind(str, Enum):
    """Canonical service codes used for pricing and reporting."""

    HAIRCUT = "haircut"
    BEARD = "beard"
    COMBO = "combo"


# Prices in HUF
SERVICE_PRICES = {
    ServiceKind.HAIRCUT: 5500,
    ServiceKind.BEARD: 3500,
    ServiceKind.COMBO: 8000,
}


class NotificationEvent(str, Enum):
    """Booking events delivered to notification collaborators."""

    CREATED = "created"
    CANCELLED = "cancelled"
    REMINDER = "reminder"


class DayStatus(str, Enum):
    """Calendar day status shown in the month view legend."""

    PAST = "past"
    CLOSED = "closed"
    AVAILABLE = "available"
    PARTIAL = "partial"
    BOOKED = "booked"
