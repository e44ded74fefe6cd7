from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..domain.notifications.repository import NotificationRepository
from ..domain.notifications.schemas import (
    MarkAllReadEnvelope,
    NotificationEnvelope,
    NotificationPage,
    NotificationPageEnvelope,
    notification_to_response,
)
from ..errors import NotFoundError
from ..models import User
from ..shared.pagination import paginate

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationPageEnvelope)
async def get_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's notifications, newest first, with the unread total"""
    items, pagination = paginate(NotificationRepository.query_for_user(db, current_user.id), page, limit)
    return NotificationPageEnvelope(
        data=NotificationPage(
            notifications=[notification_to_response(n) for n in items],
            pagination=pagination,
            unreadCount=NotificationRepository.count_unread(db, current_user.id),
        )
    )


@router.patch("/read-all", response_model=MarkAllReadEnvelope)
async def mark_all_as_read(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = NotificationRepository.mark_all_as_read(db, current_user.id)
    return MarkAllReadEnvelope(message="All notifications marked as read", updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_as_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = NotificationRepository.mark_as_read(db, notification_id, current_user.id)
    if not notification:
        raise NotFoundError("Notification not found")
    return NotificationEnvelope(
        message="Notification marked as read", data=notification_to_response(notification)
    )
