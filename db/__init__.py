"""Database layer for K2 Barber Booking."""

from .base import Base, TimestampMixin
from .models_sqlalchemy import Booking
from .session import (
    engine,
    SessionLocal,
    create_engine,
    create_session_factory,
    get_session,
    init_db,
    drop_db,
    close_db,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "Booking",
    # Session
    "engine",
    "SessionLocal",
    "create_engine",
    "create_session_factory",
    "get_session",
    "init_db",
    "drop_db",
    "close_db",
]
