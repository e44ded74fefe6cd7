"""
Notification dispatch
Fire-and-forget delivery of in-app notifications for appointment and doctor events.

The lifecycle code only ever talks to a ``Notifier``. Two backends exist:
- DatabaseNotifier writes the notification row in-process through its own session
- QueueNotifier hands the notification to the ARQ worker (see worker.py)

Neither backend raises: failures are logged and swallowed so a notification
can never fail the transition that triggered it.
"""

import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from ..config import NOTIFIER_BACKEND
from ..constants import NotificationType
from ..database import SessionLocal
from ..domain.notifications.repository import NotificationRepository

logger = logging.getLogger(__name__)


class Notifier:
    """Send-and-forget boundary used by the appointment lifecycle"""

    async def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        meta: Optional[dict] = None,
    ) -> None:
        raise NotImplementedError


class DatabaseNotifier(Notifier):
    """Persist notifications directly, in a session separate from the request's"""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    async def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        meta: Optional[dict] = None,
    ) -> None:
        db = self.session_factory()
        try:
            NotificationRepository.create_notification(
                db, user_id, notification_type, title, message, meta
            )
            logger.info(f"{notification_type} notification stored for user {user_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to store {notification_type} notification for user {user_id}: {e}")
        finally:
            db.close()


class QueueNotifier(Notifier):
    """Enqueue notifications for the ARQ worker"""

    def __init__(self):
        self._pool = None

    async def _get_pool(self):
        if self._pool is None:
            from arq import create_pool

            from ..worker import get_redis_settings

            self._pool = await create_pool(get_redis_settings())
        return self._pool

    async def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        meta: Optional[dict] = None,
    ) -> None:
        try:
            pool = await self._get_pool()
            job = await pool.enqueue_job(
                "create_notification_task", user_id, notification_type, title, message, meta or {}
            )
            logger.info(
                f"{notification_type} notification queued for user {user_id}"
                f" (job {job.job_id if job else 'duplicate'})"
            )
        except Exception as e:
            logger.error(f"Failed to queue {notification_type} notification for user {user_id}: {e}")


_notifier: Optional[Notifier] = None


def get_notifier() -> Notifier:
    """FastAPI dependency returning the configured notifier backend"""
    global _notifier
    if _notifier is None:
        if NOTIFIER_BACKEND == "queue":
            _notifier = QueueNotifier()
        else:
            _notifier = DatabaseNotifier()
        logger.info(f"Notifier backend: {type(_notifier).__name__}")
    return _notifier


# ============================================================================
# MESSAGE TEMPLATES
# ============================================================================


async def notify_appointment_requested(
    notifier: Notifier, doctor_user_id: int, patient_name: str, appointment_id: int, patient_id: int
) -> None:
    await notifier.notify(
        doctor_user_id,
        NotificationType.APPOINTMENT_REQUEST,
        "New Appointment Request",
        f"You have a new appointment request from {patient_name}",
        {"appointmentId": appointment_id, "patientId": patient_id},
    )


async def notify_appointment_approved(
    notifier: Notifier, patient_id: int, doctor_name: str, appointment_id: int, doctor_id: int
) -> None:
    await notifier.notify(
        patient_id,
        NotificationType.APPOINTMENT_APPROVED,
        "Appointment Approved",
        f"Your appointment with Dr. {doctor_name} has been approved",
        {"appointmentId": appointment_id, "doctorId": doctor_id},
    )


async def notify_appointment_rejected(
    notifier: Notifier,
    patient_id: int,
    appointment_id: int,
    doctor_id: int,
    reason: Optional[str] = None,
) -> None:
    message = "Your appointment has been rejected"
    if reason:
        message = f"{message}: {reason}"
    await notifier.notify(
        patient_id,
        NotificationType.APPOINTMENT_REJECTED,
        "Appointment Rejected",
        message,
        {"appointmentId": appointment_id, "doctorId": doctor_id},
    )


async def notify_appointment_cancelled(
    notifier: Notifier,
    recipient_id: int,
    cancelled_by_role: str,
    actor_name: str,
    appointment_id: int,
) -> None:
    if cancelled_by_role == "patient":
        message = f"Patient {actor_name} cancelled their appointment"
    else:
        message = f"Dr. {actor_name} cancelled your appointment"
    await notifier.notify(
        recipient_id,
        NotificationType.APPOINTMENT_CANCELLED,
        "Appointment Cancelled",
        message,
        {"appointmentId": appointment_id},
    )


async def notify_appointment_completed(
    notifier: Notifier, patient_id: int, appointment_id: int, doctor_id: int
) -> None:
    await notifier.notify(
        patient_id,
        NotificationType.APPOINTMENT_COMPLETED,
        "Appointment Completed",
        "Your appointment has been completed. Check your prescription and notes.",
        {"appointmentId": appointment_id, "doctorId": doctor_id},
    )


async def notify_doctor_verified(notifier: Notifier, doctor_user_id: int, doctor_id: int) -> None:
    await notifier.notify(
        doctor_user_id,
        NotificationType.DOCTOR_VERIFIED,
        "Profile Verified",
        "Your doctor profile has been verified and is now active",
        {"doctorId": doctor_id},
    )


async def notify_new_review(
    notifier: Notifier,
    doctor_user_id: int,
    patient_name: str,
    rating: int,
    appointment_id: int,
    doctor_id: int,
    patient_id: int,
) -> None:
    await notifier.notify(
        doctor_user_id,
        NotificationType.NEW_REVIEW,
        "New Review",
        f"{patient_name} left you a {rating}-star review",
        {"appointmentId": appointment_id, "doctorId": doctor_id, "patientId": patient_id},
    )
