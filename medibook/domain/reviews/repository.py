"""Review repository - Database operations for doctor reviews"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from ...models import Doctor, Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_review_by_appointment(db: Session, appointment_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.appointment_id == appointment_id).first()

    @staticmethod
    def create_review(db: Session, **review_data) -> Review:
        """Insert a review and refresh the doctor's aggregate rating in one commit"""
        review = Review(**review_data)
        db.add(review)
        try:
            db.flush()
            ReviewRepository.refresh_doctor_rating(db, review.doctor_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(review)
        return review

    @staticmethod
    def refresh_doctor_rating(db: Session, doctor_id: int) -> None:
        average, count = (
            db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.doctor_id == doctor_id)
            .one()
        )
        db.query(Doctor).filter(Doctor.id == doctor_id).update(
            {
                Doctor.rating: round(float(average or 0), 1),
                Doctor.total_reviews: count,
            },
            synchronize_session=False,
        )

    @staticmethod
    def query_for_doctor(db: Session, doctor_id: int) -> Query:
        return (
            db.query(Review)
            .options(joinedload(Review.patient))
            .filter(Review.doctor_id == doctor_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
