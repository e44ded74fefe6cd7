"""Doctor service - Directory search and self-service profile"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import Appointment, Doctor, User
from ...shared.pagination import paginate
from ...utils.sanitization import sanitize_text
from ..appointments.repository import AppointmentRepository
from .repository import DoctorRepository
from .schemas import DoctorProfileUpdate, profile_to_columns

logger = logging.getLogger(__name__)


class DoctorService:
    """Service layer for doctor business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DoctorRepository()

    def search_doctors(
        self,
        specialization: Optional[str] = None,
        city: Optional[str] = None,
        min_experience: Optional[int] = None,
        max_fee: Optional[float] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Doctor], dict]:
        query = self.repo.search_doctors(self.db, specialization, city, min_experience, max_fee)
        return paginate(query, page, limit)

    def get_public_doctor(self, doctor_id: int) -> Doctor:
        """Only verified, active doctors are visible to the public"""
        doctor = self.repo.get_doctor_by_id(self.db, doctor_id)
        if not doctor or not doctor.is_verified or not doctor.is_active:
            raise NotFoundError("Doctor not found")
        return doctor

    def get_my_profile(self, user: User) -> Doctor:
        doctor = self.repo.get_doctor_by_user(self.db, user.id)
        if not doctor:
            raise NotFoundError("Doctor profile not found")
        return doctor

    def update_my_profile(self, user: User, data: DoctorProfileUpdate) -> Doctor:
        doctor = self.get_my_profile(user)

        updates = profile_to_columns(data, exclude_unset=True)
        if "bio" in updates:
            updates["bio"] = sanitize_text(updates["bio"])

        doctor = self.repo.update_doctor(self.db, doctor, **updates)
        logger.info(f"Doctor {doctor.id} updated profile fields: {sorted(updates)}")
        return doctor

    def get_my_appointments(
        self, user: User, status: Optional[str] = None, on_date: Optional[date] = None
    ) -> list[Appointment]:
        """The doctor's appointments, optionally for a single day"""
        doctor = self.get_my_profile(user)
        query = AppointmentRepository.query_appointments(
            self.db, doctor_id=doctor.id, status=status, date_from=on_date, date_to=on_date
        )
        return query.all()
