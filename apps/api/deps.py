"""FastAPI dependencies."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from core.availability_policy import AvailabilityPolicy, get_availability_policy
from db.session import get_session
from services.booking_service import BookingService
from services.booking_store import BookingStore
from services.notifications import NotificationDispatcher, build_notification_dispatcher


_notifier: Optional[NotificationDispatcher] = None
_notifier_built = False


def get_policy() -> AvailabilityPolicy:
    """Opening-hours policy for the shop."""
    return get_availability_policy()


def get_notifier() -> Optional[NotificationDispatcher]:
    """Process-wide notification dispatcher, built from settings on first use."""
    global _notifier, _notifier_built
    if not _notifier_built:
        _notifier = build_notification_dispatcher()
        _notifier_built = True
    return _notifier


def get_booking_service(
    db: Session = Depends(get_session),
    policy: AvailabilityPolicy = Depends(get_policy),
    notifier: Optional[NotificationDispatcher] = Depends(get_notifier),
) -> BookingService:
    """Booking service bound to the request's database session."""
    return BookingService(BookingStore(db), policy, notifier=notifier)
