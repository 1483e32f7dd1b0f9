"""ORM -> response schema converters shared by the routers."""

from datetime import datetime
from typing import Optional

from app.models.class_ import Class
from app.models.class_request import ClassRequest
from app.models.notification import Notification
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.class_ import ClassResponse
from app.schemas.class_request import ClassRequestResponse
from app.schemas.notification import NotificationResponse


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def class_request_response(request: ClassRequest) -> ClassRequestResponse:
    # Review fields come from the status variant; absent ones serialise as null
    review = request.review
    return ClassRequestResponse(
        id=request.id,
        tutor_id=request.tutor_id,
        tutor_name=request.tutor.name if request.tutor else None,
        title=request.title,
        description=request.description or "",
        subject=request.subject,
        grade=request.grade,
        location=request.location,
        schedule=request.schedule,
        price=request.price,
        status=request.status,
        review_note=getattr(review, "note", None),
        reviewed_by=getattr(review, "reviewed_by", None),
        reviewed_at=_iso(getattr(review, "reviewed_at", None)),
        class_id=getattr(review, "class_id", None),
        created_at=_iso(request.created_at) or "",
    )


def class_response(cls: Class) -> ClassResponse:
    return ClassResponse(
        id=cls.id,
        tutor_id=cls.tutor_id,
        tutor_name=cls.tutor.name if cls.tutor else None,
        title=cls.title,
        description=cls.description or "",
        subject=cls.subject,
        grade=cls.grade,
        location=cls.location,
        schedule=cls.schedule,
        price=cls.price,
        promoted=cls.promoted,
        is_active=cls.is_active,
        created_at=_iso(cls.created_at) or "",
        updated_at=_iso(cls.updated_at) or "",
    )


def notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        user_id=notification.user_id,
        title=notification.title,
        message=notification.message,
        category=notification.category,
        read=notification.read,
        created_at=_iso(notification.created_at) or "",
    )


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        name=user.name,
        is_approved=user.is_approved,
        created_at=_iso(user.created_at) or "",
    )
