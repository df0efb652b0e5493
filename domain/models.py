"""Domain models using Pydantic v2 for K2 Barber Booking."""

import re
from datetime import date as Date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from core.utils_datetime import parse_iso_date, parse_slot_time
from .enums import BookingStatus, ServiceKind, DayStatus


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def validate_email_address(value: str) -> str:
    """Check the email shape; the address is kept as provided."""
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class BookingBase(BaseModel):
    """Base booking model with common fields."""

    service: str = Field(..., min_length=1, max_length=100, description="Service display label")
    service_kind: Optional[ServiceKind] = Field(None, description="Canonical service code")
    date: Date = Field(..., description="Booking date (YYYY-MM-DD)")
    time: str = Field(..., description="Slot start time (HH:MM)")
    customer_name: str = Field(..., min_length=1, max_length=100, description="Customer name")
    phone: str = Field(..., min_length=1, max_length=30, description="Phone in display format")
    email: str = Field(..., min_length=3, max_length=254, description="Customer email")
    notes: Optional[str] = Field(None, max_length=1000, description="Optional free text")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        from_attributes=True,
    )

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_slot_time(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return validate_email_address(v)


class BookingCreate(BookingBase):
    """Model for creating a new booking; phone is normalized by the service."""

    pass


class BookingUpdate(BaseModel):
    """Model for updating an existing booking."""

    service: Optional[str] = Field(None, min_length=1, max_length=100)
    service_kind: Optional[ServiceKind] = None
    date: Optional[Date] = None
    time: Optional[str] = None
    customer_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[str] = Field(None, min_length=3, max_length=254)
    notes: Optional[str] = Field(None, max_length=1000)
    status: Optional[BookingStatus] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v) if v is not None else v

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_slot_time(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email_address(v) if v is not None else v


class BookingRecord(BookingBase):
    """Complete booking record from the store."""

    id: int
    status: BookingStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @property
    def is_active(self) -> bool:
        return self.status.is_active


class DaySummary(BaseModel):
    """Availability of one calendar day."""

    date: Date
    status: DayStatus
    total_slots: int
    booked_slots: int
    available_slots: int
    slots: List[str]


class MonthOverview(BaseModel):
    """Availability of every day in a month, for the calendar view."""

    year: int
    month: int = Field(..., ge=1, le=12)
    days: List[DaySummary]


class BookingStatistics(BaseModel):
    """Admin dashboard figures."""

    total_bookings: int
    today_bookings: int
    upcoming_bookings: int
    total_revenue: int
    currency: str = "HUF"
