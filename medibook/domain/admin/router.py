"""Admin router - Dashboard, doctor, patient and appointment management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_role
from ...clock import get_clock
from ...constants import UserRole
from ...database import get_db
from ...schemas import UserEnvelope, user_to_response
from ...services.notification_service import Notifier, get_notifier
from ..appointments.router import get_appointment_service, parse_date_filter, parse_status_filter
from ..appointments.schemas import PaginatedAppointments, appointment_to_response
from ..appointments.service import AppointmentService
from ..doctors.schemas import DoctorEnvelope, DoctorListEnvelope, doctor_to_response
from .schemas import (
    AdminDoctorCreate,
    AdminDoctorUpdate,
    DashboardStatsEnvelope,
    PatientListEnvelope,
)
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)


def get_admin_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    clock=Depends(get_clock),
) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db, notifier, clock)


@router.get("/dashboard/stats", response_model=DashboardStatsEnvelope)
async def get_dashboard_stats(service: AdminService = Depends(get_admin_service)):
    return DashboardStatsEnvelope(data=service.get_stats())


# ============================================================================
# DOCTORS
# ============================================================================


@router.get("/doctors", response_model=DoctorListEnvelope)
async def list_doctors(
    is_verified: Optional[bool] = Query(None, alias="isVerified"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    specialization: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: AdminService = Depends(get_admin_service),
):
    doctors, pagination = service.list_doctors(is_verified, is_active, specialization, page, limit)
    return DoctorListEnvelope(data=[doctor_to_response(d) for d in doctors], pagination=pagination)


@router.get("/doctors/{doctor_id}", response_model=DoctorEnvelope)
async def get_doctor(doctor_id: int, service: AdminService = Depends(get_admin_service)):
    return DoctorEnvelope(data=doctor_to_response(service.get_doctor(doctor_id)))


@router.post("/doctors", response_model=DoctorEnvelope, status_code=201)
async def create_doctor(data: AdminDoctorCreate, service: AdminService = Depends(get_admin_service)):
    doctor = await service.create_doctor(data)
    return DoctorEnvelope(message="Doctor created successfully", data=doctor_to_response(doctor))


@router.put("/doctors/{doctor_id}", response_model=DoctorEnvelope)
async def update_doctor(
    doctor_id: int, data: AdminDoctorUpdate, service: AdminService = Depends(get_admin_service)
):
    doctor = service.update_doctor(doctor_id, data)
    return DoctorEnvelope(message="Doctor updated successfully", data=doctor_to_response(doctor))


@router.patch("/doctors/{doctor_id}/verify", response_model=DoctorEnvelope)
async def verify_doctor(doctor_id: int, service: AdminService = Depends(get_admin_service)):
    doctor = await service.verify_doctor(doctor_id)
    return DoctorEnvelope(message="Doctor verified successfully", data=doctor_to_response(doctor))


# ============================================================================
# PATIENTS
# ============================================================================


@router.get("/patients", response_model=PatientListEnvelope)
async def list_patients(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: AdminService = Depends(get_admin_service),
):
    patients, pagination = service.list_patients(is_active, page, limit)
    return PatientListEnvelope(data=[user_to_response(p) for p in patients], pagination=pagination)


@router.patch("/patients/{patient_id}/deactivate", response_model=UserEnvelope)
async def deactivate_patient(patient_id: int, service: AdminService = Depends(get_admin_service)):
    patient = service.deactivate_patient(patient_id)
    return UserEnvelope(message="Patient deactivated successfully", data=user_to_response(patient))


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments", response_model=PaginatedAppointments)
async def list_appointments(
    status: Optional[str] = Query(None),
    doctor_id: Optional[int] = Query(None, alias="doctorId"),
    patient_id: Optional[int] = Query(None, alias="patientId"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Every appointment in the system, newest first"""
    appointments, pagination = service.list_all_appointments(
        status=parse_status_filter(status),
        doctor_id=doctor_id,
        patient_id=patient_id,
        date_from=parse_date_filter(date_from, "from"),
        date_to=parse_date_filter(date_to, "to"),
        page=page,
        limit=limit,
    )
    return PaginatedAppointments(
        data=[appointment_to_response(a) for a in appointments], pagination=pagination
    )
