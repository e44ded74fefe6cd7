"""Doctor repository - Database operations for doctor profiles"""

from typing import Optional

from sqlalchemy.orm import Query, Session, joinedload

from ...models import Doctor


class DoctorRepository:
    """Repository for doctor database operations"""

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
        return (
            db.query(Doctor)
            .options(joinedload(Doctor.user))
            .filter(Doctor.user_id == user_id)
            .first()
        )

    @staticmethod
    def search_doctors(
        db: Session,
        specialization: Optional[str] = None,
        city: Optional[str] = None,
        min_experience: Optional[int] = None,
        max_fee: Optional[float] = None,
    ) -> Query:
        """Verified, active doctors matching the filters; best rated and most experienced first"""
        query = (
            db.query(Doctor)
            .options(joinedload(Doctor.user))
            .filter(Doctor.is_verified.is_(True), Doctor.is_active.is_(True))
        )

        if specialization:
            query = query.filter(Doctor.specialization.ilike(f"%{specialization}%"))
        if city:
            query = query.filter(Doctor.address["city"].as_string().ilike(f"%{city}%"))
        if min_experience is not None:
            query = query.filter(Doctor.experience_years >= min_experience)
        if max_fee is not None:
            query = query.filter(Doctor.consultation_fee <= max_fee)

        return query.order_by(Doctor.rating.desc(), Doctor.experience_years.desc(), Doctor.id)

    @staticmethod
    def filter_doctors(
        db: Session,
        is_verified: Optional[bool] = None,
        is_active: Optional[bool] = None,
        specialization: Optional[str] = None,
    ) -> Query:
        """All doctors regardless of status, for admin listings; newest first"""
        query = db.query(Doctor).options(joinedload(Doctor.user))

        if is_verified is not None:
            query = query.filter(Doctor.is_verified.is_(is_verified))
        if is_active is not None:
            query = query.filter(Doctor.is_active.is_(is_active))
        if specialization:
            query = query.filter(Doctor.specialization.ilike(f"%{specialization}%"))

        return query.order_by(Doctor.created_at.desc(), Doctor.id.desc())

    @staticmethod
    def create_doctor(db: Session, user_id: int, commit: bool = True, **doctor_data) -> Doctor:
        """Create a doctor profile for a user"""
        doctor = Doctor(user_id=user_id, **doctor_data)
        db.add(doctor)
        if commit:
            db.commit()
            db.refresh(doctor)
        return doctor

    @staticmethod
    def update_doctor(db: Session, doctor: Doctor, **updates) -> Doctor:
        """Update a doctor profile with provided fields"""
        for key, value in updates.items():
            if hasattr(doctor, key):
                setattr(doctor, key, value)

        db.commit()
        db.refresh(doctor)
        return doctor
