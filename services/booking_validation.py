"""
Booking input validation and normalization.
Collects field-level errors for missing or malformed booking data and
normalizes Hungarian phone numbers to the display format.
"""

import re
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from domain.models import BookingCreate, BookingUpdate
from services.exceptions import ValidationError


logger = logging.getLogger(__name__)


# ============================================================================
# Phone Number Normalization & Validation
# ============================================================================

HUNGARIAN_COUNTRY_CODE = "36"

# Subscriber number: 2-digit area/mobile code + 7 digits
SUBSCRIBER_DIGITS = 9

PHONE_ALLOWED_CHARS = re.compile(r'^[\d\s\-\.\(\)\+/]+$')


def normalize_hungarian_phone(phone: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Normalize a Hungarian phone number to "+36 XX XXX XXXX".

    Accepted inputs (separators ignored):
      - +36 / 36 followed by 9 digits
      - 0036 followed by 9 digits
      - 06 followed by 9 digits
      - 9 digits without prefix

    Args:
        phone: Raw phone number input

    Returns:
        Tuple of (formatted_phone, error_message)
    """
    if not phone or not phone.strip():
        return None, "Phone number is required"

    if not PHONE_ALLOWED_CHARS.match(phone.strip()):
        return None, "Phone number contains invalid characters"

    digits = re.sub(r'\D', '', phone)

    if len(digits) == 13 and digits.startswith('00' + HUNGARIAN_COUNTRY_CODE):
        subscriber = digits[4:]
    elif len(digits) == 11 and digits.startswith(HUNGARIAN_COUNTRY_CODE):
        subscriber = digits[2:]
    elif len(digits) == 11 and digits.startswith('06'):
        subscriber = digits[2:]
    elif len(digits) == SUBSCRIBER_DIGITS and not digits.startswith('0'):
        subscriber = digits
    else:
        return None, "Invalid Hungarian phone number"

    formatted = f"+{HUNGARIAN_COUNTRY_CODE} {subscriber[:2]} {subscriber[2:5]} {subscriber[5:]}"
    return formatted, None


def validate_phone(phone: Optional[str]) -> bool:
    """Check whether a phone number is a valid Hungarian number."""
    formatted, _ = normalize_hungarian_phone(phone)
    return formatted is not None


# ============================================================================
# Booking Input Validation
# ============================================================================

REQUIRED_FIELDS = ("service", "date", "time", "customer_name", "email", "phone")

# Keys used by the booking form and older clients
FIELD_ALIASES = {
    "name": "customer_name",
    "customerName": "customer_name",
    "serviceKind": "service_kind",
    "serviceValue": "service_kind",
}


def _canonical_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    canonical: Dict[str, Any] = {}
    for key, value in data.items():
        canonical[FIELD_ALIASES.get(key, key)] = value
    return canonical


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _collect_pydantic_errors(exc: PydanticValidationError, errors: Dict[str, str]) -> None:
    for error in exc.errors():
        name = str(error["loc"][0]) if error.get("loc") else "__root__"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(name, message)


def validate_booking_input(data: Mapping[str, Any]) -> BookingCreate:
    """
    Validate and normalize booking input.

    Args:
        data: Raw booking fields; "name" is accepted for customer_name

    Returns:
        BookingCreate with the phone in display format

    Raises:
        ValidationError: Listing every missing or invalid field
    """
    payload = _canonical_keys(data)
    errors: Dict[str, str] = {}

    for name in REQUIRED_FIELDS:
        if _is_blank(payload.get(name)):
            errors[name] = "This field is required"

    if "phone" not in errors:
        formatted, phone_error = normalize_hungarian_phone(str(payload["phone"]))
        if phone_error:
            errors["phone"] = phone_error
        else:
            payload["phone"] = formatted

    if _is_blank(payload.get("service_kind")):
        payload.pop("service_kind", None)

    booking = None
    try:
        booking = BookingCreate.model_validate(payload)
    except PydanticValidationError as e:
        _collect_pydantic_errors(e, errors)

    if errors:
        logger.warning(f"Booking input rejected: {sorted(errors)}")
        raise ValidationError(errors)

    return booking


def validate_booking_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial booking update.

    Returns:
        Dict of the fields that were provided, normalized

    Raises:
        ValidationError: If any provided field is invalid
    """
    payload = _canonical_keys(data)
    errors: Dict[str, str] = {}

    for name in REQUIRED_FIELDS:
        if name in payload and _is_blank(payload[name]):
            errors[name] = "This field cannot be empty"

    if "phone" in payload and "phone" not in errors:
        formatted, phone_error = normalize_hungarian_phone(str(payload["phone"]))
        if phone_error:
            errors["phone"] = phone_error
        else:
            payload["phone"] = formatted

    update = None
    try:
        update = BookingUpdate.model_validate(
            {k: v for k, v in payload.items() if k not in errors}
        )
    except PydanticValidationError as e:
        _collect_pydantic_errors(e, errors)

    if errors:
        logger.warning(f"Booking update rejected: {sorted(errors)}")
        raise ValidationError(errors)

    return update.model_dump(exclude_unset=True)
