"""Doctor router - Public directory and doctor self-service endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_role
from ...constants import UserRole
from ...database import get_db
from ...models import User
from ..appointments.router import parse_date_filter, parse_status_filter
from ..appointments.schemas import AppointmentListEnvelope, appointment_to_response
from .schemas import (
    DoctorEnvelope,
    DoctorListEnvelope,
    DoctorProfileUpdate,
    doctor_to_response,
)
from .service import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/doctors", tags=["Doctors"])


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    """Dependency injection for DoctorService"""
    return DoctorService(db)


# ============================================================================
# DOCTOR SELF-SERVICE
# ============================================================================


@router.get("/me/profile", response_model=DoctorEnvelope)
async def get_my_profile(
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: DoctorService = Depends(get_doctor_service),
):
    return DoctorEnvelope(data=doctor_to_response(service.get_my_profile(current_user)))


@router.put("/me/profile", response_model=DoctorEnvelope)
async def update_my_profile(
    data: DoctorProfileUpdate,
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: DoctorService = Depends(get_doctor_service),
):
    doctor = service.update_my_profile(current_user, data)
    return DoctorEnvelope(message="Profile updated successfully", data=doctor_to_response(doctor))


@router.get("/me/appointments", response_model=AppointmentListEnvelope)
async def get_my_appointments(
    status: Optional[str] = Query(None),
    on_date: Optional[str] = Query(None, alias="date", description="Single day (YYYY-MM-DD)"),
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: DoctorService = Depends(get_doctor_service),
):
    appointments = service.get_my_appointments(
        current_user, parse_status_filter(status), parse_date_filter(on_date, "date")
    )
    return AppointmentListEnvelope(data=[appointment_to_response(a) for a in appointments])


# ============================================================================
# PUBLIC DIRECTORY
# ============================================================================


@router.get("", response_model=DoctorListEnvelope)
async def search_doctors(
    specialization: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    min_experience: Optional[int] = Query(None, alias="minExperience", ge=0),
    max_fee: Optional[float] = Query(None, alias="maxFee", ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: DoctorService = Depends(get_doctor_service),
):
    """Search verified, active doctors"""
    doctors, pagination = service.search_doctors(
        specialization, city, min_experience, max_fee, page, limit
    )
    return DoctorListEnvelope(data=[doctor_to_response(d) for d in doctors], pagination=pagination)


@router.get("/{doctor_id}", response_model=DoctorEnvelope)
async def get_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    return DoctorEnvelope(data=doctor_to_response(service.get_public_doctor(doctor_id)))
