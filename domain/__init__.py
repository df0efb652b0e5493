"""Domain layer for K2 Barber Booking."""

from .enums import (
    BookingStatus,
    ServiceKind,
    SERVICE_PRICES,
    NotificationEvent,
    DayStatus,
)
from .models import (
    BookingBase,
    BookingCreate,
    BookingUpdate,
    BookingRecord,
    DaySummary,
    MonthOverview,
    BookingStatistics,
)

__all__ = [
    # Enums
    "BookingStatus",
    "ServiceKind",
    "SERVICE_PRICES",
    "NotificationEvent",
    "DayStatus",
    # Models
    "BookingBase",
    "BookingCreate",
    "BookingUpdate",
    "BookingRecord",
    "DaySummary",
    "MonthOverview",
    "BookingStatistics",
]
