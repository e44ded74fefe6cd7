"""Appointment router - FastAPI endpoints for booking and lifecycle transitions"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_role
from ...clock import get_clock
from ...constants import AppointmentStatus, UserRole
from ...database import get_db
from ...errors import InvalidInputError
from ...models import User
from ...services.notification_service import Notifier, get_notifier
from .schemas import (
    AppointmentCreate,
    AppointmentEnvelope,
    AppointmentListEnvelope,
    CompleteRequest,
    ReasonRequest,
    appointment_to_response,
)
from .service import AppointmentService
from .slots import parse_appointment_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    clock=Depends(get_clock),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, notifier, clock)


def parse_date_filter(value: Optional[str], name: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_appointment_date(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid '{name}' date: {e}") from e


def parse_status_filter(value: Optional[str]) -> Optional[str]:
    if value and value not in AppointmentStatus.ALL:
        raise InvalidInputError(f"Invalid status '{value}'")
    return value or None


# ============================================================================
# BOOKING & LISTING
# ============================================================================


@router.post("", response_model=AppointmentEnvelope, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_role(UserRole.PATIENT)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Request an appointment slot with a doctor"""
    appointment = await service.create_appointment(data, current_user)
    return AppointmentEnvelope(
        message="Appointment requested successfully", data=appointment_to_response(appointment)
    )


@router.get("", response_model=AppointmentListEnvelope)
async def get_appointments(
    status: Optional[str] = Query(None, description="Filter by status"),
    date_from: Optional[str] = Query(None, alias="from", description="Earliest date (inclusive)"),
    date_to: Optional[str] = Query(None, alias="to", description="Latest date (inclusive)"),
    current_user: User = Depends(require_role(UserRole.PATIENT, UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """List the caller's own appointments, newest first"""
    appointments = service.list_appointments(
        current_user,
        status=parse_status_filter(status),
        date_from=parse_date_filter(date_from, "from"),
        date_to=parse_date_filter(date_to, "to"),
    )
    return AppointmentListEnvelope(data=[appointment_to_response(a) for a in appointments])


@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(require_role(UserRole.PATIENT, UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get a single appointment the caller takes part in"""
    appointment = service.get_appointment(appointment_id, current_user)
    return AppointmentEnvelope(data=appointment_to_response(appointment))


# ============================================================================
# LIFECYCLE TRANSITIONS
# ============================================================================


@router.patch("/{appointment_id}/approve", response_model=AppointmentEnvelope)
async def approve_appointment(
    appointment_id: int,
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = await service.approve_appointment(appointment_id, current_user)
    return AppointmentEnvelope(
        message="Appointment approved successfully", data=appointment_to_response(appointment)
    )


@router.patch("/{appointment_id}/reject", response_model=AppointmentEnvelope)
async def reject_appointment(
    appointment_id: int,
    body: Optional[ReasonRequest] = None,
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    reason = body.reason if body else None
    appointment = await service.reject_appointment(appointment_id, current_user, reason)
    return AppointmentEnvelope(
        message="Appointment rejected successfully", data=appointment_to_response(appointment)
    )


@router.patch("/{appointment_id}/cancel", response_model=AppointmentEnvelope)
async def cancel_appointment(
    appointment_id: int,
    body: Optional[ReasonRequest] = None,
    current_user: User = Depends(require_role(UserRole.PATIENT, UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    reason = body.reason if body else None
    appointment = await service.cancel_appointment(appointment_id, current_user, reason)
    return AppointmentEnvelope(
        message="Appointment cancelled successfully", data=appointment_to_response(appointment)
    )


@router.patch("/{appointment_id}/complete", response_model=AppointmentEnvelope)
async def complete_appointment(
    appointment_id: int,
    body: Optional[CompleteRequest] = None,
    current_user: User = Depends(require_role(UserRole.DOCTOR)),
    service: AppointmentService = Depends(get_appointment_service),
):
    body = body or CompleteRequest()
    appointment = await service.complete_appointment(
        appointment_id, current_user, body.notes, body.prescription
    )
    return AppointmentEnvelope(
        message="Appointment completed successfully", data=appointment_to_response(appointment)
    )
