from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import UserRole
from .domain.doctors.schemas import DoctorProfileCreate, DoctorResponse
from .shared.validators import validate_email

GENDERS = ("male", "female", "other")


def _check_gender(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().lower()
    if value not in GENDERS:
        raise ValueError(f"Gender must be one of {', '.join(GENDERS)}")
    return value


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None
    role: str = UserRole.PATIENT
    doctorProfile: Optional[DoctorProfileCreate] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str) -> str:
        if value not in UserRole.SELF_SIGNUP:
            raise ValueError(f"Role must be one of {', '.join(UserRole.SELF_SIGNUP)}")
        return value

    @field_validator("gender")
    @classmethod
    def check_gender(cls, value: Optional[str]) -> Optional[str]:
        return _check_gender(value)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return value.strip().lower()


class UserUpdate(BaseModel):
    """Patient self-service fields"""

    phone: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None

    @field_validator("gender")
    @classmethod
    def check_gender(cls, value: Optional[str]) -> Optional[str]:
        return _check_gender(value)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    isActive: bool
    createdAt: datetime


def user_to_response(user) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        phone=user.phone,
        age=user.age,
        gender=user.gender,
        isActive=user.is_active,
        createdAt=user.created_at,
    )


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: UserResponse


class AuthData(BaseModel):
    user: UserResponse
    token: Optional[str] = None
    doctorProfile: Optional[DoctorResponse] = None


class AuthEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AuthData


class MessageResponse(BaseModel):
    success: bool = True
    message: str
