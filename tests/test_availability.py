from datetime import date

import pytest
from conftest import make_doctor

from medibook.constants import AppointmentStatus
from medibook.domain.appointments.availability import is_slot_available, validate_availability
from medibook.errors import (
    DayUnavailableError,
    DoctorUnavailableError,
    InvalidInputError,
    InvalidSlotError,
    NotFoundError,
)
from medibook.models import Appointment

MONDAY = date(2030, 1, 7)
SATURDAY = date(2030, 1, 12)


def test_returns_the_doctor(db, clock, doctor):
    resolved = validate_availability(db, doctor.id, MONDAY, "10:00-10:30", clock)
    assert resolved.id == doctor.id


def test_unknown_doctor(db, clock):
    with pytest.raises(NotFoundError):
        validate_availability(db, 999, MONDAY, "10:00-10:30", clock)


def test_unverified_doctor(db, clock):
    doctor = make_doctor(db, "new@example.com", is_verified=False)
    with pytest.raises(DoctorUnavailableError) as exc:
        validate_availability(db, doctor.id, MONDAY, "10:00-10:30", clock)
    assert exc.value.kind == "unavailable"


def test_inactive_doctor(db, clock):
    doctor = make_doctor(db, "gone@example.com", is_active=False)
    with pytest.raises(DoctorUnavailableError):
        validate_availability(db, doctor.id, MONDAY, "10:00-10:30", clock)


def test_day_not_available(db, clock, doctor):
    with pytest.raises(DayUnavailableError) as exc:
        validate_availability(db, doctor.id, SATURDAY, "10:00-10:30", clock)
    assert exc.value.message == "Doctor not available on saturday"


def test_slot_outside_windows(db, clock, doctor):
    with pytest.raises(InvalidSlotError):
        validate_availability(db, doctor.id, MONDAY, "12:00-12:30", clock)


def test_window_bounds(db, clock):
    doctor = make_doctor(db, "short@example.com", time_slots=[{"start": "09:00", "end": "09:30"}])

    assert validate_availability(db, doctor.id, MONDAY, "09:00-09:30", clock).id == doctor.id
    with pytest.raises(InvalidSlotError):
        validate_availability(db, doctor.id, MONDAY, "09:30-10:00", clock)


def test_malformed_slot(db, clock, doctor):
    with pytest.raises(InvalidInputError):
        validate_availability(db, doctor.id, MONDAY, "10-11", clock)


def test_start_in_the_past(db, clock, doctor):
    # Clock is Monday 2030-01-07 08:00 UTC
    with pytest.raises(InvalidInputError, match="future"):
        validate_availability(db, doctor.id, date(2029, 12, 31), "10:00-10:30", clock)


def test_unknown_doctor_is_reported_before_a_past_date(db, clock):
    with pytest.raises(NotFoundError):
        validate_availability(db, 999, date(2020, 1, 6), "10:00-10:30", clock)


def test_unavailable_doctor_is_reported_before_a_past_date(db, clock):
    doctor = make_doctor(db, "new@example.com", is_verified=False)
    with pytest.raises(DoctorUnavailableError):
        validate_availability(db, doctor.id, date(2029, 12, 31), "10:00-10:30", clock)


def test_invalid_slot_is_reported_before_a_past_time(db, clock, doctor):
    # 07:30 on Monday is both in the past and outside the doctor's hours
    with pytest.raises(InvalidSlotError):
        validate_availability(db, doctor.id, MONDAY, "07:30-08:00", clock)


class TestIsSlotAvailable:
    def _appointment(self, db, doctor, patient, status, slot="10:00-10:30"):
        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            date=MONDAY,
            slot=slot,
            reason="Checkup",
            status=status,
        )
        db.add(appointment)
        db.commit()
        return appointment

    def test_free_slot(self, db, doctor):
        assert is_slot_available(db, doctor.id, MONDAY, "10:00-10:30")

    @pytest.mark.parametrize("status", AppointmentStatus.ACTIVE)
    def test_active_booking_blocks(self, db, doctor, patient, status):
        self._appointment(db, doctor, patient, status)
        assert not is_slot_available(db, doctor.id, MONDAY, "10:00-10:30")

    @pytest.mark.parametrize("status", AppointmentStatus.TERMINAL)
    def test_terminal_booking_frees_the_slot(self, db, doctor, patient, status):
        self._appointment(db, doctor, patient, status)
        assert is_slot_available(db, doctor.id, MONDAY, "10:00-10:30")

    def test_overlapping_slots_do_not_collide(self, db, doctor, patient):
        # Conflicts are exact matches on the slot string
        self._appointment(db, doctor, patient, AppointmentStatus.PENDING)
        assert is_slot_available(db, doctor.id, MONDAY, "10:15-10:45")

    def test_other_doctor_is_unaffected(self, db, doctor, other_doctor, patient):
        self._appointment(db, doctor, patient, AppointmentStatus.APPROVED)
        assert is_slot_available(db, other_doctor.id, MONDAY, "10:00-10:30")
