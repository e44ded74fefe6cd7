"""Admin service - Dashboard, doctor onboarding and user management"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...constants import AppointmentStatus, UserRole
from ...errors import ConflictError, NotFoundError
from ...models import Appointment, Doctor, User
from ...security_utils import hash_password
from ...services.notification_service import Notifier, notify_doctor_verified
from ...shared.pagination import paginate
from ...utils.sanitization import sanitize_text
from ..doctors.repository import DoctorRepository
from ..doctors.schemas import profile_to_columns
from .schemas import AdminDoctorCreate, AdminDoctorUpdate, DashboardStats

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


class AdminService:
    """Service layer for admin operations"""

    def __init__(self, db: Session, notifier: Notifier, clock):
        self.db = db
        self.notifier = notifier
        self.clock = clock
        self.doctors = DoctorRepository()

    def get_stats(self) -> DashboardStats:
        # created_at is stored as naive UTC
        since = (self.clock.now() - timedelta(days=RECENT_DAYS)).replace(tzinfo=None)
        appointments = self.db.query(Appointment)

        return DashboardStats(
            totalDoctors=self.db.query(Doctor).count(),
            totalPatients=self.db.query(User).filter(User.role == UserRole.PATIENT).count(),
            totalAppointments=appointments.count(),
            pendingAppointments=appointments.filter(Appointment.status == AppointmentStatus.PENDING).count(),
            completedAppointments=appointments.filter(
                Appointment.status == AppointmentStatus.COMPLETED
            ).count(),
            recentAppointments=appointments.filter(Appointment.created_at >= since).count(),
        )

    # ------------------------------------------------------------------
    # Doctors
    # ------------------------------------------------------------------

    def list_doctors(
        self,
        is_verified: Optional[bool] = None,
        is_active: Optional[bool] = None,
        specialization: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Doctor], dict]:
        query = self.doctors.filter_doctors(self.db, is_verified, is_active, specialization)
        return paginate(query, page, limit)

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.doctors.get_doctor_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    async def create_doctor(self, data: AdminDoctorCreate) -> Doctor:
        """Create a doctor account and a verified profile in one transaction"""
        if self.db.query(User).filter(User.email == data.userData.email).first():
            raise ConflictError("User already exists with this email")

        user = User(
            name=data.userData.name.strip(),
            email=data.userData.email,
            password_hash=hash_password(data.userData.password),
            phone=data.userData.phone,
            role=UserRole.DOCTOR,
        )
        self.db.add(user)

        columns = profile_to_columns(data.doctorProfile)
        columns["bio"] = sanitize_text(columns.get("bio"))

        try:
            self.db.flush()
            doctor = self.doctors.create_doctor(self.db, user.id, commit=False, is_verified=True, **columns)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User already exists with this email") from e

        logger.info(f"Admin created verified doctor {doctor.id} for user {user.id}")
        await notify_doctor_verified(self.notifier, user.id, doctor.id)
        return self.get_doctor(doctor.id)

    def update_doctor(self, doctor_id: int, data: AdminDoctorUpdate) -> Doctor:
        doctor = self.get_doctor(doctor_id)

        updates = profile_to_columns(data, exclude_unset=True)
        if "bio" in updates:
            updates["bio"] = sanitize_text(updates["bio"])
        if data.isActive is not None:
            updates["is_active"] = data.isActive

        doctor = self.doctors.update_doctor(self.db, doctor, **updates)
        logger.info(f"Admin updated doctor {doctor.id}: {sorted(updates)}")
        return doctor

    async def verify_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.get_doctor(doctor_id)
        if doctor.is_verified:
            return doctor

        doctor = self.doctors.update_doctor(self.db, doctor, is_verified=True)
        logger.info(f"Doctor {doctor.id} verified")
        await notify_doctor_verified(self.notifier, doctor.user_id, doctor.id)
        return doctor

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------

    def list_patients(
        self, is_active: Optional[bool] = None, page: int = 1, limit: int = 10
    ) -> tuple[list[User], dict]:
        query = self.db.query(User).filter(User.role == UserRole.PATIENT)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))
        return paginate(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)

    def deactivate_patient(self, patient_id: int) -> User:
        """Patients are deactivated, never deleted"""
        patient = (
            self.db.query(User)
            .filter(User.id == patient_id, User.role == UserRole.PATIENT)
            .first()
        )
        if not patient:
            raise NotFoundError("Patient not found")

        patient.is_active = False
        self.db.commit()
        self.db.refresh(patient)
        logger.info(f"Patient {patient.id} deactivated")
        return patient
