"""Slot strings and appointment dates.

A slot is the canonical string ``"HH:MM-HH:MM"``. For conflict detection it is
an opaque key compared by exact equality; only the validator looks inside it
to find the start time. Dates follow a UTC policy: an ISO-8601 value is
converted to UTC and reduced to its calendar date.
"""

import re
from datetime import date, datetime, time, timezone

from ...constants import WEEKDAYS

SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)-([01]\d|2[0-3]):([0-5]\d)$")


def parse_slot(slot: str) -> tuple[str, str]:
    """
    Split a canonical slot into (start, end).

    Raises:
        ValueError: If the slot is not "HH:MM-HH:MM" or does not end after it starts
    """
    if not isinstance(slot, str):
        raise ValueError("Time slot must be a string like 10:00-10:30")

    match = SLOT_PATTERN.match(slot.strip())
    if not match:
        raise ValueError(f"Invalid time slot '{slot}', expected HH:MM-HH:MM")

    start, end = slot.strip().split("-")
    if start >= end:
        raise ValueError(f"Time slot '{slot}' must end after it starts")
    return start, end


def parse_appointment_date(value) -> date:
    """
    Reduce an ISO-8601 date or datetime to its UTC calendar date.

    Naive datetimes are taken as UTC; aware ones are converted first.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value
    else:
        text = str(value).strip()
        if not text:
            raise ValueError("Appointment date is required")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date '{value}', expected ISO-8601") from None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def weekday_name(day: date) -> str:
    """Lowercase English weekday name, matching Doctor.available_days entries"""
    return WEEKDAYS[day.weekday()]


def appointment_start(day: date, slot: str) -> datetime:
    """Aware UTC instant at which the appointment begins"""
    start, _ = parse_slot(slot)
    hours, minutes = (int(part) for part in start.split(":"))
    return datetime.combine(day, time(hours, minutes), tzinfo=timezone.utc)
