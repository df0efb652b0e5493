"""Pytest configuration and fixtures for booking tests."""
import pytest
from datetime import date, datetime
from typing import List, Tuple

from fastapi.testclient import TestClient

from apps.api.deps import get_booking_service
from apps.api.main import app
from core.availability_policy import AvailabilityPolicy, HoursWindow
from core.utils_datetime import TIMEZONE
from db.session import create_engine, create_session_factory, drop_db, init_db
from domain.enums import NotificationEvent
from domain.models import BookingRecord
from services.booking_service import BookingService
from services.booking_store import BookingStore
from services.notifications import NotificationDispatcher


class RecordingNotifier(NotificationDispatcher):
    """Keeps every dispatched event for assertions."""

    def __init__(self):
        self.events: List[Tuple[NotificationEvent, BookingRecord]] = []

    def dispatch(self, booking, event):
        self.events.append((event, booking))

    def kinds(self) -> List[NotificationEvent]:
        return [event for event, _ in self.events]


class FailingNotifier(NotificationDispatcher):
    """Simulates an unreachable delivery channel."""

    def dispatch(self, booking, event):
        raise RuntimeError("delivery channel down")


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    drop_db(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for testing."""
    SessionLocal = create_session_factory(db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def now():
    """Sunday 2026-03-01 09:00 in the business timezone."""
    return TIMEZONE.localize(datetime(2026, 3, 1, 9, 0))


@pytest.fixture(scope="function")
def clock(now):
    return lambda: now


@pytest.fixture(scope="function")
def booking_store(db_session, clock):
    """Create a booking store instance for testing."""
    return BookingStore(db_session, clock=clock)


@pytest.fixture(scope="function")
def basic_policy():
    """Open 10-19 every day, no closures, no lunch break."""
    return AvailabilityPolicy(default_hours=HoursWindow(10, 19))


@pytest.fixture(scope="function")
def shop_policy():
    """Calendar with a holiday, closed Sundays, a special day and Saturday hours."""
    return AvailabilityPolicy(
        default_hours=HoursWindow(10, 19),
        closed_days=frozenset({date(2026, 12, 25)}),
        closed_weekdays=frozenset({0}),
        special_hours={
            date(2026, 3, 14): HoursWindow(12, 15),  # a Saturday
            date(2026, 3, 11): HoursWindow(14, 17),
        },
        weekend_hours={6: HoursWindow(9, 16)},
    )


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def failing_notifier():
    return FailingNotifier()


@pytest.fixture(scope="function")
def make_service(booking_store, basic_policy, notifier, clock):
    """Factory fixture for a booking service over the test store."""
    def _make(policy=None, dispatcher=notifier, service_clock=clock):
        return BookingService(
            booking_store,
            policy or basic_policy,
            notifier=dispatcher,
            clock=service_clock,
        )
    return _make


@pytest.fixture(scope="function")
def booking_service(make_service):
    """Create a booking service instance for testing."""
    return make_service()


@pytest.fixture(scope="function")
def sample_booking_data():
    """Provide sample booking form data for testing."""
    return {
        "service": "Hajvágás",
        "service_kind": "haircut",
        "date": "2026-03-10",  # Tuesday
        "time": "10:00",
        "customer_name": "Kovács Péter",
        "email": "peter.kovacs@example.com",
        "phone": "06 30 123 4567",
        "notes": "Rövid oldalt",
    }


@pytest.fixture(scope="function")
def create_sample_booking(booking_service, sample_booking_data):
    """Factory fixture to create a sample booking."""
    def _create(**kwargs):
        data = sample_booking_data.copy()
        data.update(kwargs)
        return booking_service.create_booking(data)
    return _create


@pytest.fixture(scope="function")
def api_client(booking_service):
    """HTTP client whose requests use the test booking service."""
    app.dependency_overrides[get_booking_service] = lambda: booking_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
