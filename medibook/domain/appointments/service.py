"""Appointment service - Booking, lifecycle transitions and listings

Lifecycle:
    pending -> approved -> completed
    pending -> rejected
    pending | approved -> cancelled

Rejected, cancelled and completed are terminal. Every transition is applied
with a compare-and-swap on the current status, and every successful
transition notifies the counterparty through the injected Notifier.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import CANCELLATION_WINDOW_HOURS
from ...constants import AppointmentStatus, CreatedBy, UserRole
from ...errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    TooLateError,
)
from ...models import Appointment, Doctor, User
from ...services.notification_service import (
    Notifier,
    notify_appointment_approved,
    notify_appointment_cancelled,
    notify_appointment_completed,
    notify_appointment_rejected,
    notify_appointment_requested,
)
from ...shared.pagination import paginate
from ...utils.sanitization import sanitize_text
from .availability import is_slot_available, validate_availability
from .repository import AppointmentRepository
from .schemas import AppointmentCreate
from .slots import appointment_start

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is already booked"


def clean_text(value: Optional[str], field: str, max_length: int) -> Optional[str]:
    """Check the length of the trimmed input, then sanitize it for storage"""
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        raise InvalidInputError(f"{field} exceeds maximum length of {max_length} characters")
    return sanitize_text(value)



class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session, notifier: Notifier, clock):
        self.db = db
        self.notifier = notifier
        self.clock = clock
        self.repo = AppointmentRepository()

    # ------------------------------------------------------------------
    # Lookups and authorization
    # ------------------------------------------------------------------

    def doctor_profile_for_user(self, user: User) -> Doctor:
        """Doctor profile owned by a doctor account"""
        doctor = self.repo.get_doctor_by_user(self.db, user.id)
        if not doctor:
            raise NotFoundError("Doctor profile not found")
        return doctor

    def _load(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def _authorize_patient(self, appointment: Appointment, user: User) -> None:
        if appointment.patient_id != user.id:
            logger.warning(f"Patient {user.id} denied access to appointment {appointment.id}")
            raise ForbiddenError("Access denied")

    def _authorize_doctor(self, appointment: Appointment, user: User) -> Doctor:
        # Doctors are matched through their profile, never by user id
        doctor = self.repo.get_doctor_by_user(self.db, user.id)
        if not doctor or appointment.doctor_id != doctor.id:
            logger.warning(f"Doctor user {user.id} denied access to appointment {appointment.id}")
            raise ForbiddenError("Access denied - You can only act on your own appointments")
        return doctor

    def _authorize_participant(self, appointment: Appointment, user: User) -> None:
        if user.role == UserRole.PATIENT:
            self._authorize_patient(appointment, user)
        elif user.role == UserRole.DOCTOR:
            self._authorize_doctor(appointment, user)
        else:
            raise ForbiddenError("Access denied")

    def _apply_transition(
        self,
        appointment: Appointment,
        expected: tuple[str, ...],
        new_status: str,
        **fields,
    ) -> Appointment:
        """Swap the status only if it is still one of ``expected``"""
        swapped = self.repo.transition_status(self.db, appointment.id, expected, new_status, **fields)
        self.db.expire_all()
        current = self._load(appointment.id)
        if not swapped:
            logger.warning(
                f"Appointment {appointment.id} changed concurrently: expected {expected}, found {current.status}"
            )
            raise InvalidStateError(self._state_message(expected, new_status))

        logger.info(f"Appointment {appointment.id}: {'/'.join(expected)} -> {new_status}")
        return current

    @staticmethod
    def _state_message(expected: tuple[str, ...], new_status: str) -> str:
        verb = {
            AppointmentStatus.APPROVED: "approved",
            AppointmentStatus.REJECTED: "rejected",
            AppointmentStatus.CANCELLED: "cancelled",
            AppointmentStatus.COMPLETED: "completed",
        }[new_status]
        return f"Only {' or '.join(expected)} appointments can be {verb}"

    def _require_status(self, appointment: Appointment, expected: tuple[str, ...], new_status: str) -> None:
        if appointment.status not in expected:
            raise InvalidStateError(self._state_message(expected, new_status))

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_appointment(self, data: AppointmentCreate, patient: User) -> Appointment:
        """Request a new appointment in pending state"""
        reason = clean_text(data.reason, "Reason", 500)
        if not reason:
            raise InvalidInputError("Reason for appointment is required")

        doctor = validate_availability(self.db, data.doctorId, data.date, data.slot, self.clock)

        if not is_slot_available(self.db, doctor.id, data.date, data.slot):
            raise ConflictError(SLOT_TAKEN_MESSAGE)

        try:
            appointment = self.repo.create_appointment(
                self.db,
                patient_id=patient.id,
                doctor_id=doctor.id,
                date=data.date,
                slot=data.slot,
                reason=reason,
                status=AppointmentStatus.PENDING,
                created_by=CreatedBy.PATIENT,
            )
        except IntegrityError as e:
            # Lost the race: another request booked the slot after our pre-flight check
            logger.warning(
                f"Active slot constraint rejected booking doctor={doctor.id} date={data.date} slot={data.slot}: {e.orig}"
            )
            raise ConflictError(SLOT_TAKEN_MESSAGE) from e

        logger.info(
            f"Appointment {appointment.id} requested by patient {patient.id} with doctor {doctor.id} "
            f"on {data.date} {data.slot}"
        )

        await notify_appointment_requested(
            self.notifier, doctor.user_id, patient.name, appointment.id, patient.id
        )

        return self._load(appointment.id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self._load(appointment_id)
        self._authorize_participant(appointment, user)
        return appointment

    def list_appointments(
        self,
        user: User,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Appointment]:
        """Personal listing for a patient or doctor (unpaginated)"""
        if user.role == UserRole.PATIENT:
            query = self.repo.query_appointments(
                self.db, patient_id=user.id, status=status, date_from=date_from, date_to=date_to
            )
        elif user.role == UserRole.DOCTOR:
            doctor = self.doctor_profile_for_user(user)
            query = self.repo.query_appointments(
                self.db, doctor_id=doctor.id, status=status, date_from=date_from, date_to=date_to
            )
        else:
            raise ForbiddenError("Access denied")

        return query.all()

    def list_all_appointments(
        self,
        status: Optional[str] = None,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Appointment], dict]:
        """System-wide listing for admins (paginated)"""
        query = self.repo.query_appointments(
            self.db,
            patient_id=patient_id,
            doctor_id=doctor_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
        )
        return paginate(query, page, limit)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def approve_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self._load(appointment_id)
        doctor = self._authorize_doctor(appointment, user)

        expected = (AppointmentStatus.PENDING,)
        self._require_status(appointment, expected, AppointmentStatus.APPROVED)
        appointment = self._apply_transition(appointment, expected, AppointmentStatus.APPROVED)

        await notify_appointment_approved(
            self.notifier, appointment.patient_id, user.name, appointment.id, doctor.id
        )
        return appointment

    async def reject_appointment(
        self, appointment_id: int, user: User, reason: Optional[str] = None
    ) -> Appointment:
        appointment = self._load(appointment_id)
        doctor = self._authorize_doctor(appointment, user)

        expected = (AppointmentStatus.PENDING,)
        self._require_status(appointment, expected, AppointmentStatus.REJECTED)
        reason = clean_text(reason, "Reason", 500)
        appointment = self._apply_transition(
            appointment, expected, AppointmentStatus.REJECTED, cancellation_reason=reason
        )

        await notify_appointment_rejected(
            self.notifier, appointment.patient_id, appointment.id, doctor.id, reason
        )
        return appointment

    async def cancel_appointment(
        self, appointment_id: int, user: User, reason: Optional[str] = None
    ) -> Appointment:
        appointment = self._load(appointment_id)
        self._authorize_participant(appointment, user)

        expected = AppointmentStatus.ACTIVE
        self._require_status(appointment, expected, AppointmentStatus.CANCELLED)

        # Measured from the slot start in UTC, not midnight of the appointment date
        starts_at = appointment_start(appointment.date, appointment.slot)
        window = timedelta(hours=CANCELLATION_WINDOW_HOURS)
        if starts_at - self.clock.now() < window:
            raise TooLateError(
                f"Appointments can only be cancelled at least {CANCELLATION_WINDOW_HOURS:g} hours in advance"
            )

        reason = clean_text(reason, "Reason", 500)
        appointment = self._apply_transition(
            appointment, expected, AppointmentStatus.CANCELLED, cancellation_reason=reason
        )

        # Notify the other party
        if user.role == UserRole.PATIENT:
            recipient_id = appointment.doctor.user_id
        else:
            recipient_id = appointment.patient_id

        await notify_appointment_cancelled(
            self.notifier, recipient_id, user.role, user.name, appointment.id
        )
        return appointment

    async def complete_appointment(
        self,
        appointment_id: int,
        user: User,
        notes: Optional[str] = None,
        prescription: Optional[str] = None,
    ) -> Appointment:
        appointment = self._load(appointment_id)
        doctor = self._authorize_doctor(appointment, user)

        expected = (AppointmentStatus.APPROVED,)
        self._require_status(appointment, expected, AppointmentStatus.COMPLETED)
        appointment = self._apply_transition(
            appointment,
            expected,
            AppointmentStatus.COMPLETED,
            notes=clean_text(notes, "Notes", 1000),
            prescription=clean_text(prescription, "Prescription", 1000),
        )

        await notify_appointment_completed(
            self.notifier, appointment.patient_id, appointment.id, doctor.id
        )
        return appointment
