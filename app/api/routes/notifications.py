# app/api/routes/notifications.py
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_notification_service
from app.core.security import get_current_user
from app.schemas.common import MessageResponse
from app.schemas.notification import Notification, UnreadCount
from app.schemas.user import User
from app.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[Notification])
def list_notifications(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
):
    return notifications.list_for_user(current_user.uid)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
):
    return UnreadCount(count=notifications.unread_count(current_user.uid))


# declared before /{notification_id}/read so "mark-all-read" is never taken for an id
@router.patch("/mark-all-read", response_model=MessageResponse)
def mark_all_read(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
):
    notifications.mark_all_read(current_user.uid)
    return {"message": "All notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
def mark_read(
    notification_id: str,
    notifications: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
):
    notifications.mark_read(notification_id, current_user.uid)
    return {"message": "Notification marked as read"}
