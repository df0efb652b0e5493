"""Admin endpoints for the booking table, statistics and reminders."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from apps.api.deps import get_booking_service
from domain.enums import BookingStatus
from domain.models import BookingRecord, BookingStatistics
from services.booking_service import BookingService


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/bookings", response_model=List[BookingRecord])
def list_bookings(
    status: Optional[BookingStatus] = Query(None, description="Filter by booking status"),
    start: Optional[date] = Query(None, description="First date of the range"),
    end: Optional[date] = Query(None, description="Last date of the range"),
    q: Optional[str] = Query(None, description="Search name, email, phone or service"),
    service: BookingService = Depends(get_booking_service),
):
    """
    List bookings with optional filtering.

    Args:
        status: Filter by booking status (pending, confirmed, cancelled, completed)
        start: Only bookings on or after this date
        end: Only bookings on or before this date
        q: Case-insensitive search term

    Returns:
        List[BookingRecord]: Bookings, most recent slot first
    """
    if start and end and start > end:
        raise HTTPException(status_code=422, detail="start must not be after end")

    bookings = service.search(q) if q else service.list_bookings(status)

    if q and status:
        bookings = [b for b in bookings if b.status == status]
    if start:
        bookings = [b for b in bookings if b.date >= start]
    if end:
        bookings = [b for b in bookings if b.date <= end]

    return bookings


@router.get("/stats", response_model=BookingStatistics)
def get_stats(service: BookingService = Depends(get_booking_service)):
    """Booking counts and expected revenue."""
    return service.get_statistics()


@router.post("/reminders")
def send_reminders(service: BookingService = Depends(get_booking_service)):
    """Send reminders for tomorrow's bookings."""
    return {"sent": service.send_daily_reminders()}
