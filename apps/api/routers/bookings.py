"""Customer booking endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status

from apps.api.deps import get_booking_service
from domain.models import BookingRecord
from services.booking_service import BookingService


router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingRecord, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: Dict[str, Any] = Body(...),
    service: BookingService = Depends(get_booking_service),
):
    """
    Book a slot.

    Field errors are reported together (422); a slot that is closed,
    past or already taken is rejected with 409.
    """
    return service.create_booking(payload)


@router.get("/{booking_id}", response_model=BookingRecord)
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """Get a specific booking by ID."""
    return service.get_booking(booking_id)


@router.patch("/{booking_id}", response_model=BookingRecord)
def update_booking(
    booking_id: int,
    payload: Dict[str, Any] = Body(...),
    service: BookingService = Depends(get_booking_service),
):
    """Change booking details; moving to a taken slot is rejected with 409."""
    return service.update_booking(booking_id, payload)


@router.post("/{booking_id}/cancel", response_model=BookingRecord)
def cancel_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """Cancel a booking and free its slot."""
    return service.cancel_booking(booking_id)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """Permanently delete a booking."""
    service.delete_booking(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
