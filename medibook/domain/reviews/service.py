"""Review service - Patients rate completed appointments"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...constants import AppointmentStatus
from ...errors import ConflictError, ForbiddenError, InvalidStateError, NotFoundError
from ...models import Review, User
from ...services.notification_service import Notifier, notify_new_review
from ...shared.pagination import paginate
from ..appointments.repository import AppointmentRepository
from ..appointments.service import clean_text
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)

ALREADY_REVIEWED_MESSAGE = "This appointment has already been reviewed"


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session, notifier: Notifier):
        self.db = db
        self.notifier = notifier
        self.repo = ReviewRepository()

    async def create_review(self, appointment_id: int, data: ReviewCreate, patient: User) -> Review:
        appointment = AppointmentRepository.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        if appointment.patient_id != patient.id:
            raise ForbiddenError("Access denied")
        if appointment.status != AppointmentStatus.COMPLETED:
            raise InvalidStateError("Only completed appointments can be reviewed")
        if self.repo.get_review_by_appointment(self.db, appointment.id):
            raise ConflictError(ALREADY_REVIEWED_MESSAGE)

        try:
            review = self.repo.create_review(
                self.db,
                doctor_id=appointment.doctor_id,
                patient_id=patient.id,
                appointment_id=appointment.id,
                rating=data.rating,
                comment=clean_text(data.comment, "Comment", 500),
            )
        except IntegrityError as e:
            raise ConflictError(ALREADY_REVIEWED_MESSAGE) from e

        logger.info(
            f"Patient {patient.id} rated doctor {appointment.doctor_id} {data.rating}/5 "
            f"for appointment {appointment.id}"
        )

        await notify_new_review(
            self.notifier,
            appointment.doctor.user_id,
            patient.name,
            data.rating,
            appointment.id,
            appointment.doctor_id,
            patient.id,
        )
        return review

    def list_doctor_reviews(self, doctor_id: int, page: int = 1, limit: int = 10) -> tuple[list[Review], dict]:
        if not AppointmentRepository.get_doctor_by_id(self.db, doctor_id):
            raise NotFoundError("Doctor not found")
        return paginate(self.repo.query_for_doctor(self.db, doctor_id), page, limit)
