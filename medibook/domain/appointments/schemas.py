"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .slots import parse_appointment_date, parse_slot


class AppointmentCreate(BaseModel):
    """Schema for requesting a new appointment"""

    doctorId: int
    date: date_type
    slot: str
    reason: str = Field(..., max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, value):
        return parse_appointment_date(value)

    @field_validator("slot")
    @classmethod
    def validate_slot(cls, value: str) -> str:
        parse_slot(value)
        return value.strip()

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Reason for appointment is required")
        return value


class ReasonRequest(BaseModel):
    """Body for reject and cancel"""

    reason: Optional[str] = Field(None, max_length=500)


class CompleteRequest(BaseModel):
    """Body for complete"""

    notes: Optional[str] = Field(None, max_length=1000)
    prescription: Optional[str] = Field(None, max_length=1000)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None

    class Config:
        from_attributes = True


class DoctorSummary(BaseModel):
    id: int
    specialization: str
    clinicName: str
    consultationFee: float
    user: Optional[UserSummary] = None


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    patientId: int
    doctorId: int
    date: date_type
    slot: str
    status: str
    reason: str
    notes: Optional[str] = None
    prescription: Optional[str] = None
    cancellationReason: Optional[str] = None
    createdBy: str
    createdAt: datetime
    updatedAt: datetime
    patient: Optional[UserSummary] = None
    doctor: Optional[DoctorSummary] = None


class AppointmentEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AppointmentResponse


class AppointmentListEnvelope(BaseModel):
    success: bool = True
    data: list[AppointmentResponse]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedAppointments(BaseModel):
    success: bool = True
    data: list[AppointmentResponse]
    pagination: Pagination


def user_to_summary(user) -> Optional[UserSummary]:
    return UserSummary.model_validate(user) if user else None


def doctor_to_summary(doctor) -> Optional[DoctorSummary]:
    if not doctor:
        return None
    return DoctorSummary(
        id=doctor.id,
        specialization=doctor.specialization,
        clinicName=doctor.clinic_name,
        consultationFee=doctor.consultation_fee,
        user=user_to_summary(doctor.user),
    )


def appointment_to_response(appointment) -> AppointmentResponse:
    """Build the populated response for an appointment row"""
    return AppointmentResponse(
        id=appointment.id,
        patientId=appointment.patient_id,
        doctorId=appointment.doctor_id,
        date=appointment.date,
        slot=appointment.slot,
        status=appointment.status,
        reason=appointment.reason,
        notes=appointment.notes,
        prescription=appointment.prescription,
        cancellationReason=appointment.cancellation_reason,
        createdBy=appointment.created_by,
        createdAt=appointment.created_at,
        updatedAt=appointment.updated_at,
        patient=user_to_summary(appointment.patient),
        doctor=doctor_to_summary(appointment.doctor),
    )
