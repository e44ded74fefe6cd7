"""Shared validation utilities"""

import re
from typing import Optional

from ..constants import WEEKDAYS

# Zero-padded 24h wall-clock time, e.g. "09:30"
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


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

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time(value: str) -> str:
    """
    Validate a zero-padded HH:MM wall-clock time.

    Zero padding matters: slot and window bounds are compared as strings.

    Raises:
        ValueError: If the value is not HH:MM
    """
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValueError(f"Invalid time '{value}', expected zero-padded HH:MM")
    return value


def validate_weekdays(days: list[str]) -> list[str]:
    """
    Normalize a list of weekday names to lowercase, removing duplicates
    while keeping the submitted order.

    Raises:
        ValueError: If any entry is not a weekday name
    """
    normalized = []
    for day in days:
        name = str(day).strip().lower()
        if name not in WEEKDAYS:
            raise ValueError(f"Invalid weekday '{day}'")
        if name not in normalized:
            normalized.append(name)
    return normalized


def validate_time_window(start: str, end: str) -> tuple[str, str]:
    """Validate a {start, end} working window; start must be strictly before end."""
    validate_time(start)
    validate_time(end)
    if start >= end:
        raise ValueError(f"Window start {start} must be before end {end}")
    return start, end
