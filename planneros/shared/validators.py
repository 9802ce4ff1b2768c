"""Shared validation utilities"""

import re
import uuid
from datetime import date, datetime, timezone
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Reduce a phone number to the digits used for matching.

    Country prefixes and formatting are dropped: only the last 10 digits are kept,
    so "+91 98765-43210" and "9876543210" compare equal.
    """
    if not phone:
        return None
    digits = re.sub(r"\D", "", phone)
    if not digits:
        return None
    return digits[-10:]


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a phone number.

    Args:
        phone: Phone number string in various formats

    Returns:
        Stripped phone number

    Raises:
        ValueError: If the number has fewer than 10 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10 or len(digits) > 15:
        raise ValueError("Phone number must have between 10 and 15 digits")

    return phone


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate a 24h HH:MM time string"""
    if value is None:
        return value
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def validate_currency(value: Optional[str]) -> Optional[str]:
    """Validate a 3-letter ISO currency code, uppercased"""
    if value is None:
        return value
    value = value.strip().upper()
    if not CURRENCY_PATTERN.match(value):
        raise ValueError("Currency must be a 3-letter code")
    return value


def validate_choice(value: Optional[str], choices, field: str) -> Optional[str]:
    """Ensure value is one of the allowed enum values"""
    if value is None:
        return value
    if value not in choices:
        raise ValueError(f"Invalid {field}. Must be one of: {', '.join(choices)}")
    return value


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return datetime.now(timezone.utc).date()


def validate_url(value: Optional[str]) -> Optional[str]:
    """Require an absolute http(s) URL"""
    if value is None:
        return value
    value = value.strip()
    if not re.match(r"^https?://[^\s/$.?#].[^\s]*$", value, re.IGNORECASE):
        raise ValueError("Invalid URL")
    return value
