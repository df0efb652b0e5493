"""Availability endpoints for the booking calendar."""

from fastapi import APIRouter, Depends, Path

from apps.api.deps import get_booking_service
from domain.models import DaySummary, MonthOverview
from services.booking_service import BookingService


router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/month/{year}/{month}", response_model=MonthOverview)
def get_month_overview(
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    service: BookingService = Depends(get_booking_service),
):
    """Status of every day in a month for the calendar view."""
    return service.get_month_overview(year, month)


@router.get("/{booking_date}", response_model=DaySummary)
def get_day_availability(
    booking_date: str,
    service: BookingService = Depends(get_booking_service),
):
    """
    Free slots and slot counts for a single date.

    Args:
        booking_date: Date in YYYY-MM-DD format

    Returns:
        DaySummary: Day status and free slots
    """
    return service.get_day_summary(booking_date)
