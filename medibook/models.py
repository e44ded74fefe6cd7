from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from .constants import AppointmentStatus, CreatedBy, UserRole
from .database import Base


def utcnow():
    """Naive UTC timestamp (all stored datetimes are naive UTC)"""
    return datetime.utcnow()


# Partial index predicate: only active appointments take part in slot uniqueness
ACTIVE_STATUS_PREDICATE = text("status IN ('pending', 'approved')")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), default=UserRole.PATIENT, nullable=False)  # patient, doctor, admin
    is_active = Column(Boolean, default=True, nullable=False)  # Deactivated instead of deleted
    phone = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    doctor_profile = relationship("Doctor", back_populates="user", uselist=False)
    appointments = relationship("Appointment", back_populates="patient")
    notifications = relationship("Notification", back_populates="user")


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = (
        CheckConstraint("consultation_fee >= 0", name="ck_doctors_fee_non_negative"),
        CheckConstraint("experience_years >= 0", name="ck_doctors_experience_non_negative"),
        Index("ix_doctors_verified_active", "is_verified", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # One profile per user
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    specialization = Column(String(255), index=True, nullable=False)
    experience_years = Column(Integer, default=0, nullable=False)
    qualification = Column(JSON, default=list, nullable=False)  # ["MBBS", "MD"]
    clinic_name = Column(String(255), nullable=False)
    address = Column(JSON, nullable=True)  # {street, city, state, pincode, country}
    consultation_fee = Column(Float, default=0, nullable=False)
    available_days = Column(JSON, default=list, nullable=False)  # ["monday", "tuesday", ...]
    time_slots = Column(JSON, default=list, nullable=False)  # [{"start": "09:00", "end": "12:00"}]
    is_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)
    bio = Column(Text, nullable=True)  # Escaped on write
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="doctor_profile")
    appointments = relationship("Appointment", back_populates="doctor")
    reviews = relationship("Review", back_populates="doctor")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # No double booking: one active appointment per (doctor, date, slot)
        Index(
            "uq_appointments_active_slot",
            "doctor_id",
            "date",
            "slot",
            unique=True,
            postgresql_where=ACTIVE_STATUS_PREDICATE,
            sqlite_where=ACTIVE_STATUS_PREDICATE,
        ),
        Index("ix_appointments_patient_date", "patient_id", "date"),
        Index("ix_appointments_doctor_date", "doctor_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    date = Column(Date, nullable=False)  # UTC calendar date
    slot = Column(String(11), nullable=False)  # "10:00-10:30"
    status = Column(String(20), default=AppointmentStatus.PENDING, index=True, nullable=False)
    reason = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)  # Set on completion
    prescription = Column(Text, nullable=True)  # Set on completion
    cancellation_reason = Column(Text, nullable=True)  # Set on reject/cancel
    created_by = Column(String(20), default=CreatedBy.PATIENT, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    patient = relationship("User", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")
    review = relationship("Review", back_populates="appointment", uselist=False)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    meta = Column(JSON, default=dict, nullable=False)  # appointmentId, doctorId, patientId
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="notifications")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("ix_reviews_doctor_created", "doctor_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # One review per appointment
    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    doctor = relationship("Doctor", back_populates="reviews")
    patient = relationship("User")
    appointment = relationship("Appointment", back_populates="review")
