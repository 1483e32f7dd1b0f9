"""Notifications router — inbox, read receipts, push tokens, admin broadcast."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.notification import (
    NotificationResponse,
    NotificationSend,
    NotificationSendResponse,
    PushTokenRegister,
)
from app.middleware.auth import get_current_user, require_admin
from app.routers.responses import notification_response
from app.services import notification_service, push_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The current user's most recent notifications."""
    return [notification_response(n) for n in notification_service.list_for_user(db, current_user.id)]


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        notification = notification_service.mark_read(db, notification_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return notification_response(notification)


@router.post("/token")
def register_push_token(
    req: PushTokenRegister,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notification_service.register_push_token(db, current_user.id, req.push_token)
    return {"message": "Push token registered"}


@router.post("/send", response_model=NotificationSendResponse)
def send_notification(
    req: NotificationSend,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Notify every user in the target group, then push to their devices."""
    count, push_tokens = notification_service.broadcast(db, req.title, req.message, req.target)
    if push_tokens:
        background_tasks.add_task(push_service.send_push, push_tokens, req.title, req.message)
    return NotificationSendResponse(
        message=f"Notification sent to {count} {req.target} users",
        count=count,
    )
