"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PHONE_PATTERN = r"^\+?[0-9\s().-]{6,20}$"
TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def normalize_email(email: str) -> str:
    return email.strip().lower()


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

    email = normalize_email(email)

    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Invalid email format")

    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a free-form phone number (digits, spaces, dashes, dots, parentheses,
    optional leading +). Returns the stripped value, or None when blank.
    """
    if phone is None:
        return None

    phone = phone.strip()
    if not phone:
        return None

    if not re.match(PHONE_PATTERN, phone):
        raise ValueError("Invalid phone number format")

    return phone


def validate_time_of_day(value: str) -> str:
    """Validate an HH:MM 24-hour time"""
    value = value.strip()
    if not re.match(TIME_OF_DAY_PATTERN, value):
        raise ValueError("Time must be in HH:MM format")
    return value


def require_text(value: Optional[str], field_name: str) -> str:
    """Reject missing or whitespace-only strings"""
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


def to_naive_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC; convert aware values before comparing or saving"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_from_timestamp(seconds: float) -> datetime:
    """Naive UTC datetime for an epoch timestamp from an injected clock"""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
