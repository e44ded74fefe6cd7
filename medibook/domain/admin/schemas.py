"""Admin domain schemas"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import UserResponse
from ...shared.validators import validate_email
from ..appointments.schemas import Pagination
from ..doctors.schemas import DoctorProfileCreate, DoctorProfileUpdate


class DashboardStats(BaseModel):
    totalDoctors: int
    totalPatients: int
    totalAppointments: int
    pendingAppointments: int
    completedAppointments: int
    recentAppointments: int


class DashboardStatsEnvelope(BaseModel):
    success: bool = True
    data: DashboardStats


class DoctorUserData(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)


class AdminDoctorCreate(BaseModel):
    """Admin-created doctors are verified immediately"""

    userData: DoctorUserData
    doctorProfile: DoctorProfileCreate


class PatientListEnvelope(BaseModel):
    success: bool = True
    data: list[UserResponse]
    pagination: Pagination


class AdminDoctorUpdate(DoctorProfileUpdate):
    isActive: Optional[bool] = None
