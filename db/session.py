"""Database session management for K2 Barber Booking."""

from typing import Generator

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings


def create_engine(url: str = settings.database_url, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine.

    In-memory SQLite databases share a single connection so that every
    session sees the same data.

    Args:
        url: Database URL
        echo: Whether to log all SQL statements

    Returns:
        SQLAlchemy engine
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return sa_create_engine(url, echo=echo, **kwargs)

    return sa_create_engine(url, echo=echo, pool_pre_ping=True)


def create_session_factory(bind: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


# Global engine instance
engine: Engine = create_engine(echo=settings.debug)

# Session factory
SessionLocal = create_session_factory(engine)


def get_session() -> Generator[Session, None, None]:
    """
    Dependency for getting a database session.

    Yields:
        Session instance

    Example:
        def my_view(session: Session = Depends(get_session)):
            # use session
            pass
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db(bind: Engine = None) -> None:
    """Initialize database by creating all tables."""
    from .base import Base
    from . import models_sqlalchemy  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def drop_db(bind: Engine = None) -> None:
    """Drop all database tables. Use with caution!"""
    from .base import Base

    Base.metadata.drop_all(bind=bind or engine)


def close_db() -> None:
    """Close database engine and all connections."""
    engine.dispose()
