"""SQLAlchemy models for K2 Barber Booking database tables."""

import datetime as dt
from typing import Optional

from sqlalchemy import Date, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin
from domain.enums import BookingStatus


ACTIVE_STATUS_CLAUSE = text(f"status != '{BookingStatus.CANCELLED.value}'")


class Booking(Base, TimestampMixin):
    """Booking table model."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )

    # Slot start, "HH:MM"
    time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
    )

    service: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    service_kind: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    customer_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    phone: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(254),
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.CONFIRMED.value,
        index=True,
    )

    __table_args__ = (
        # At most one active booking per slot
        Index(
            "uq_bookings_active_slot",
            "date",
            "time",
            unique=True,
            sqlite_where=ACTIVE_STATUS_CLAUSE,
            postgresql_where=ACTIVE_STATUS_CLAUSE,
        ),
        Index("ix_bookings_status_date", "status", "date"),
        # Ids are never reused after deletion
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """String representation of Booking."""
        return (
            f"<Booking(id={self.id}, name='{self.customer_name}', "
            f"date={self.date}, time={self.time}, status='{self.status}')>"
        )
