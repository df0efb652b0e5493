"""
Booking notifications: confirmation, reminder and cancellation messages.
Delivery happens out of band; the booking flow only hands over the record.
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from twilio.rest import Client

from core.config import Settings, settings as default_settings
from core.logging import booking_extra
from domain.enums import NotificationEvent
from domain.models import BookingRecord


logger = logging.getLogger(__name__)


MESSAGE_TEMPLATES = {
    NotificationEvent.CREATED: (
        "{business} - Booking confirmed!\n\n"
        "Service: {service}\n"
        "Time: {date} {time}\n\n"
        "See you soon!\n\n"
        "To cancel call {business_phone}"
    ),
    NotificationEvent.REMINDER: (
        "{business} - Reminder!\n\n"
        "We expect you tomorrow: {date} {time}\n"
        "Service: {service}\n\n"
        "To change your booking call {business_phone}"
    ),
    NotificationEvent.CANCELLED: (
        "{business} - Booking cancelled\n\n"
        "Time: {date} {time}\n\n"
        "Book again: {website}\n\n"
        "Questions? {business_phone}"
    ),
}


def render_message(
    booking: BookingRecord,
    event: NotificationEvent,
    config: Settings = default_settings,
) -> str:
    """Render the customer-facing text for a booking event."""
    template = MESSAGE_TEMPLATES[NotificationEvent(event)]
    return template.format(
        business=config.business_name,
        business_phone=config.business_phone,
        website=config.business_website,
        service=booking.service,
        date=booking.date.isoformat(),
        time=booking.time,
    )


def to_e164(display_phone: str) -> str:
    """Strip display separators: "+36 30 123 4567" -> "+36301234567"."""
    return "+" + "".join(ch for ch in display_phone if ch.isdigit())


class NotificationDispatcher(ABC):
    @abstractmethod
    def dispatch(self, booking: BookingRecord, event: NotificationEvent) -> None:
        """Deliver a notification for a booking event."""
        raise NotImplementedError


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Demo-mode dispatcher that only logs the rendered message."""

    def __init__(self, config: Settings = default_settings) -> None:
        self._config = config

    def dispatch(self, booking: BookingRecord, event: NotificationEvent) -> None:
        message = render_message(booking, event, self._config)
        logger.info(
            f"Notification ({event.value}) for booking {booking.id} "
            f"to {booking.email} / {booking.phone}",
            extra={**booking_extra(booking, event), "body": message},
        )


class TwilioSmsDispatcher(NotificationDispatcher):
    """Sends booking SMS messages through Twilio."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        config: Settings = default_settings,
        client: Optional[Client] = None,
    ) -> None:
        self._client = client or Client(account_sid, auth_token)
        self._from_number = from_number
        self._config = config

    def dispatch(self, booking: BookingRecord, event: NotificationEvent) -> None:
        body = render_message(booking, event, self._config)
        message = self._client.messages.create(
            to=to_e164(booking.phone),
            from_=self._from_number,
            body=body,
        )
        logger.info(
            f"SMS ({event.value}) sent for booking {booking.id} (SID {message.sid})",
            extra=booking_extra(booking, event),
        )


class CompositeNotificationDispatcher(NotificationDispatcher):
    """Fans a notification out to several dispatchers; one failing does not stop the rest."""

    def __init__(self, dispatchers: Iterable[NotificationDispatcher]) -> None:
        self._dispatchers: List[NotificationDispatcher] = list(dispatchers)

    def dispatch(self, booking: BookingRecord, event: NotificationEvent) -> None:
        for dispatcher in self._dispatchers:
            try:
                dispatcher.dispatch(booking, event)
            except Exception:
                logger.exception(
                    f"{type(dispatcher).__name__} failed for booking {booking.id} ({event.value})"
                )


def build_notification_dispatcher(config: Settings = default_settings) -> Optional[NotificationDispatcher]:
    """
    Build the dispatcher chain from settings.

    Returns:
        Dispatcher, or None when notifications are disabled
    """
    if not config.notifications_enabled:
        return None

    dispatchers: List[NotificationDispatcher] = [LoggingNotificationDispatcher(config)]

    if config.sms_enabled:
        if config.sms_configured:
            dispatchers.append(
                TwilioSmsDispatcher(
                    config.twilio_account_sid,
                    config.twilio_auth_token,
                    config.twilio_phone_number,
                    config=config,
                )
            )
        else:
            logger.warning("SMS notifications enabled but Twilio credentials are missing")

    return CompositeNotificationDispatcher(dispatchers)
