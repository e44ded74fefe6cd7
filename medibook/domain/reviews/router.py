"""Review router - Submit and browse doctor reviews"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_role
from ...constants import UserRole
from ...database import get_db
from ...models import User
from ...services.notification_service import Notifier, get_notifier
from .schemas import ReviewCreate, ReviewEnvelope, ReviewListEnvelope, review_to_response
from .service import ReviewService

router = APIRouter(tags=["Reviews"])


def get_review_service(
    db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)
) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db, notifier)


@router.post("/api/appointments/{appointment_id}/review", response_model=ReviewEnvelope, status_code=201)
async def create_review(
    appointment_id: int,
    data: ReviewCreate,
    current_user: User = Depends(require_role(UserRole.PATIENT)),
    service: ReviewService = Depends(get_review_service),
):
    """Rate a completed appointment (once)"""
    review = await service.create_review(appointment_id, data, current_user)
    return ReviewEnvelope(message="Review submitted successfully", data=review_to_response(review))


@router.get("/api/doctors/{doctor_id}/reviews", response_model=ReviewListEnvelope)
async def get_doctor_reviews(
    doctor_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
):
    reviews, pagination = service.list_doctor_reviews(doctor_id, page, limit)
    return ReviewListEnvelope(data=[review_to_response(r) for r in reviews], pagination=pagination)
