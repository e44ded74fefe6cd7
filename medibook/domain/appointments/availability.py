"""Availability validation and slot conflict checks for new appointments.

``validate_availability`` decides whether a doctor is willing to see patients
at a date and slot. ``is_slot_available`` is the pre-flight check against
existing active bookings; the partial unique index on appointments is what
actually prevents a concurrent double booking.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from ...errors import (
    DayUnavailableError,
    DoctorUnavailableError,
    InvalidInputError,
    InvalidSlotError,
    NotFoundError,
)
from ...models import Doctor
from .repository import AppointmentRepository
from .slots import appointment_start, parse_slot, weekday_name

logger = logging.getLogger(__name__)


def slot_within_windows(start: str, time_slots: list[dict]) -> bool:
    """
    True if ``start`` falls inside any working window.

    Windows are half-open: window.start <= start < window.end. Zero-padded
    HH:MM strings compare lexicographically in chronological order.
    """
    for window in time_slots or []:
        window_start = window.get("start")
        window_end = window.get("end")
        if not window_start or not window_end:
            continue
        if window_start <= start < window_end:
            return True
    return False


def validate_availability(db: Session, doctor_id: int, appointment_date: date, slot: str, clock) -> Doctor:
    """
    Check that a doctor accepts an appointment on ``appointment_date`` at ``slot``.

    Returns the resolved Doctor so callers do not need a second lookup.

    Raises:
        InvalidInputError: Malformed slot
        NotFoundError: Unknown doctor
        DoctorUnavailableError: Doctor unverified or inactive
        DayUnavailableError: Weekday not in the doctor's available days
        InvalidSlotError: Slot start outside every working window
        InvalidInputError: Start time already in the past

    Checks run in the order listed.
    """
    try:
        start, _ = parse_slot(slot)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    doctor = AppointmentRepository.get_doctor_by_id(db, doctor_id)
    if not doctor:
        raise NotFoundError("Doctor not found")

    if not doctor.is_verified or not doctor.is_active:
        logger.info(f"Booking refused: doctor {doctor_id} verified={doctor.is_verified} active={doctor.is_active}")
        raise DoctorUnavailableError()

    day = weekday_name(appointment_date)
    if day not in (doctor.available_days or []):
        raise DayUnavailableError(f"Doctor not available on {day}")

    if not slot_within_windows(start, doctor.time_slots):
        raise InvalidSlotError()

    if appointment_start(appointment_date, slot) <= clock.now():
        raise InvalidInputError("Appointment time must be in the future")

    return doctor


def is_slot_available(db: Session, doctor_id: int, appointment_date: date, slot: str) -> bool:
    """
    True iff no pending/approved appointment holds this exact (doctor, date, slot).

    Exact string match on the slot: overlapping but different slots such as
    10:00-10:30 and 10:15-10:45 do not collide.
    """
    existing = AppointmentRepository.find_active_booking(db, doctor_id, appointment_date, slot)
    return existing is None
