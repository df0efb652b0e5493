"""
Structured logging for K2 Barber Booking.

Deployed environments log one JSON object per line; booking context passed
through ``extra`` (see ``booking_extra``) is grouped under a ``booking`` key
so log queries can filter on booking id, event or slot.
"""
import logging
import sys
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from core.config import settings


# extra key -> key inside the "booking" object
BOOKING_FIELDS = {
    "booking_id": "id",
    "booking_event": "event",
    "booking_date": "date",
    "booking_time": "time",
    "booking_status": "status",
}

# Library loggers and the level they are capped at
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "alembic": logging.INFO,
    "twilio.http_client": logging.WARNING,
}

PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s%(booking_suffix)s"


def booking_extra(booking: Any, event: Optional[Any] = None) -> Dict[str, Any]:
    """
    Build the ``extra`` mapping for a log call about a booking.

    Accepts a BookingRecord, a Booking row or anything with the same
    attributes; missing attributes are left out.
    """
    extra: Dict[str, Any] = {}
    for key, attr in (("booking_id", "id"), ("booking_date", "date"),
                      ("booking_time", "time"), ("booking_status", "status")):
        value = getattr(booking, attr, None)
        if value is not None:
            extra[key] = str(getattr(value, "value", value))
    if event is not None:
        extra["booking_event"] = str(getattr(event, "value", event))
    return extra


class BookingJsonFormatter(JsonFormatter):
    """JSON formatter adding service context and a nested booking object."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = self.formatTime(record, self.datefmt)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = settings.app_name
        log_record['environment'] = settings.app_env
        log_record['timezone'] = settings.business_timezone

        booking = {
            target: log_record.pop(source)
            for source, target in BOOKING_FIELDS.items()
            if source in log_record
        }
        if booking:
            log_record['booking'] = booking

        if record.exc_info:
            log_record['exc_info'] = self.formatException(record.exc_info)


class PlainFormatter(logging.Formatter):
    """Human-readable formatter that appends booking context when present."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"{target}={getattr(record, source)}"
            for source, target in BOOKING_FIELDS.items()
            if hasattr(record, source)
        ]
        record.booking_suffix = f" [booking {' '.join(parts)}]" if parts else ""
        return super().format(record)


def build_formatter(use_json: bool) -> logging.Formatter:
    """JSON for deployed environments, plain text for development."""
    if use_json:
        return BookingJsonFormatter(
            fmt='%(timestamp)s %(level)s %(name)s %(message)s',
            datefmt='%Y-%m-%dT%H:%M:%S%z'
        )
    return PlainFormatter(fmt=PLAIN_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Log level name; defaults to settings.log_level
        json_logs: Force JSON output; defaults to JSON outside development
    """
    level = (level or settings.log_level).upper()
    use_json = (not settings.is_development) if json_logs is None else json_logs

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(use_json))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, cap in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)
    if settings.debug and settings.is_development:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        f"Logging configured ({'json' if use_json else 'plain'}, {level})"
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; use ``booking_extra`` for booking context."""
    return logging.getLogger(name)
