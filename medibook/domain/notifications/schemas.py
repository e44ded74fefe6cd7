"""Notification domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..appointments.schemas import Pagination


class NotificationResponse(BaseModel):
    id: int
    userId: int
    type: str
    title: str
    message: str
    isRead: bool
    meta: dict
    createdAt: datetime


class NotificationPage(BaseModel):
    notifications: list[NotificationResponse]
    pagination: Pagination
    unreadCount: int


class NotificationPageEnvelope(BaseModel):
    success: bool = True
    data: NotificationPage


class NotificationEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: NotificationResponse


class MarkAllReadEnvelope(BaseModel):
    success: bool = True
    message: str
    updated: int


def notification_to_response(notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        userId=notification.user_id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        isRead=notification.is_read,
        meta=notification.meta or {},
        createdAt=notification.created_at,
    )
