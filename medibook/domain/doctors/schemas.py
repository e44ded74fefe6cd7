"""Doctor domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_time_window, validate_weekdays
from ..appointments.schemas import Pagination, UserSummary


class TimeSlot(BaseModel):
    """A working window, e.g. {"start": "09:00", "end": "12:00"}"""

    start: str
    end: str

    @model_validator(mode="after")
    def check_window(self):
        validate_time_window(self.start, self.end)
        return self


class Address(BaseModel):
    street: Optional[str] = None
    city: str
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: str = "India"


class DoctorProfileBase(BaseModel):
    @field_validator("availableDays", check_fields=False)
    @classmethod
    def validate_days(cls, value):
        if value is None:
            return value
        return validate_weekdays(value)


class DoctorProfileCreate(DoctorProfileBase):
    """Profile submitted at doctor signup or admin creation"""

    specialization: str = Field(..., min_length=1)
    experienceYears: int = Field(..., ge=0)
    qualification: list[str] = Field(..., min_length=1)
    clinicName: str = Field(..., min_length=1)
    address: Optional[Address] = None
    consultationFee: float = Field(..., ge=0)
    availableDays: list[str] = Field(default_factory=list)
    timeSlots: list[TimeSlot] = Field(default_factory=list)
    bio: Optional[str] = Field(None, max_length=500)


class DoctorProfileUpdate(DoctorProfileBase):
    """Self-service or admin profile update; only provided fields change"""

    specialization: Optional[str] = Field(None, min_length=1)
    experienceYears: Optional[int] = Field(None, ge=0)
    qualification: Optional[list[str]] = None
    clinicName: Optional[str] = Field(None, min_length=1)
    address: Optional[Address] = None
    consultationFee: Optional[float] = Field(None, ge=0)
    availableDays: Optional[list[str]] = None
    timeSlots: Optional[list[TimeSlot]] = None
    bio: Optional[str] = Field(None, max_length=500)


class DoctorResponse(BaseModel):
    """Schema for doctor response"""

    id: int
    userId: int
    user: Optional[UserSummary] = None
    specialization: str
    experienceYears: int
    qualification: list[str]
    clinicName: str
    address: Optional[dict] = None
    consultationFee: float
    availableDays: list[str]
    timeSlots: list[dict]
    isVerified: bool
    isActive: bool
    rating: float
    totalReviews: int
    bio: Optional[str] = None
    createdAt: datetime


class DoctorEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: DoctorResponse


class DoctorListEnvelope(BaseModel):
    success: bool = True
    data: list[DoctorResponse]
    pagination: Pagination


# Column name for each profile field
PROFILE_FIELD_MAP = {
    "specialization": "specialization",
    "experienceYears": "experience_years",
    "qualification": "qualification",
    "clinicName": "clinic_name",
    "address": "address",
    "consultationFee": "consultation_fee",
    "availableDays": "available_days",
    "timeSlots": "time_slots",
    "bio": "bio",
}


def profile_to_columns(data: BaseModel, exclude_unset: bool = False) -> dict:
    """Map a profile schema onto Doctor column values"""
    values = data.model_dump(exclude_unset=exclude_unset)
    return {PROFILE_FIELD_MAP[key]: value for key, value in values.items() if key in PROFILE_FIELD_MAP}


def doctor_to_response(doctor) -> DoctorResponse:
    return DoctorResponse(
        id=doctor.id,
        userId=doctor.user_id,
        user=UserSummary.model_validate(doctor.user) if doctor.user else None,
        specialization=doctor.specialization,
        experienceYears=doctor.experience_years,
        qualification=doctor.qualification or [],
        clinicName=doctor.clinic_name,
        address=doctor.address,
        consultationFee=doctor.consultation_fee,
        availableDays=doctor.available_days or [],
        timeSlots=doctor.time_slots or [],
        isVerified=doctor.is_verified,
        isActive=doctor.is_active,
        rating=doctor.rating,
        totalReviews=doctor.total_reviews,
        bio=doctor.bio,
        createdAt=doctor.created_at,
    )
