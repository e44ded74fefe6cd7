"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Query, Session, joinedload

from ...constants import AppointmentStatus
from ...models import Appointment, Doctor, utcnow


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        """Get an appointment with patient and doctor (and the doctor's user) loaded"""
        return (
            db.query(Appointment)
            .options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor).joinedload(Doctor.user),
            )
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_doctor_by_id(db: Session, doctor_id: int) -> Optional[Doctor]:
        return (
            db.query(Doctor)
            .options(joinedload(Doctor.user))
            .filter(Doctor.id == doctor_id)
            .first()
        )

    @staticmethod
    def get_doctor_by_user(db: Session, user_id: int) -> Optional[Doctor]:
        """Doctor profile owned by a user account"""
        return db.query(Doctor).filter(Doctor.user_id == user_id).first()

    @staticmethod
    def find_active_booking(
        db: Session, doctor_id: int, appointment_date: date, slot: str
    ) -> Optional[Appointment]:
        """Active (pending/approved) appointment holding this exact doctor/date/slot"""
        return (
            db.query(Appointment)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == appointment_date,
                Appointment.slot == slot,
                Appointment.status.in_(AppointmentStatus.ACTIVE),
            )
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        """
        Insert a new appointment.
        Raises sqlalchemy IntegrityError when the active-slot index rejects it;
        the session is rolled back before re-raising.
        """
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(appointment)
        return appointment

    @staticmethod
    def transition_status(
        db: Session,
        appointment_id: int,
        expected_statuses: tuple[str, ...],
        new_status: str,
        **fields,
    ) -> bool:
        """
        Compare-and-swap the status of an appointment.

        The UPDATE only matches while the row is still in one of
        ``expected_statuses``; returns False when another request got there first.
        """
        values = {"status": new_status, "updated_at": utcnow(), **fields}
        updated = (
            db.query(Appointment)
            .filter(
                Appointment.id == appointment_id,
                Appointment.status.in_(expected_statuses),
            )
            .update(values, synchronize_session=False)
        )
        db.commit()
        return updated == 1

    @staticmethod
    def query_appointments(
        db: Session,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Query:
        """Filtered appointments, newest date first, then most recently created"""
        query = db.query(Appointment).options(
            joinedload(Appointment.patient),
            joinedload(Appointment.doctor).joinedload(Doctor.user),
        )

        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if status:
            query = query.filter(Appointment.status == status)
        if date_from:
            query = query.filter(Appointment.date >= date_from)
        if date_to:
            query = query.filter(Appointment.date <= date_to)

        return query.order_by(
            Appointment.date.desc(), Appointment.created_at.desc(), Appointment.id.desc()
        )
