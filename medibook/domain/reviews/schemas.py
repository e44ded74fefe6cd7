"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..appointments.schemas import Pagination


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)


class ReviewPatient(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ReviewResponse(BaseModel):
    id: int
    doctorId: int
    patientId: int
    appointmentId: int
    rating: int
    comment: Optional[str] = None
    createdAt: datetime
    patient: Optional[ReviewPatient] = None


class ReviewEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: ReviewResponse


class ReviewListEnvelope(BaseModel):
    success: bool = True
    data: list[ReviewResponse]
    pagination: Pagination


def review_to_response(review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        doctorId=review.doctor_id,
        patientId=review.patient_id,
        appointmentId=review.appointment_id,
        rating=review.rating,
        comment=review.comment,
        createdAt=review.created_at,
        patient=ReviewPatient.model_validate(review.patient) if review.patient else None,
    )
