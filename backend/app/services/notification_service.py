"""Notification service — per-user in-app message log."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.notification import Notification
from app.models.user import User
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)

BROADCAST_TARGETS = {
    "all": None,
    "students": "student",
    "tutors": "tutor",
}


def add_notification(
    db: Session,
    user_id: str,
    title: str,
    message: str,
    category: str = "general",
) -> Notification:
    """Stage a notification in the caller's transaction without committing."""
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        category=category,
    )
    db.add(notification)
    return notification


def append(
    db: Session,
    user_id: str,
    title: str,
    message: str,
    category: str = "general",
) -> Notification:
    """Append a notification for an existing user and commit it."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    notification = add_notification(db, user_id, title, message, category)
    db.commit()
    db.refresh(notification)
    return notification


def list_for_user(db: Session, user_id: str, limit: Optional[int] = None) -> list[Notification]:
    """Most recent notifications for a user, newest first."""
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit or settings.NOTIFICATIONS_PAGE_SIZE)
        .all()
    )


def mark_read(db: Session, notification_id: str, user_id: str) -> Notification:
    """Mark one of the user's notifications as read.

    A notification addressed to someone else is reported exactly like a
    missing one.
    """
    updated = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .update({Notification.read: True}, synchronize_session=False)
    )
    if updated == 0:
        db.rollback()
        raise NotFoundError("Notification not found")
    db.commit()
    return db.query(Notification).filter(Notification.id == notification_id).first()


def register_push_token(db: Session, user_id: str, push_token: str) -> User:
    """Store the device push token used for best-effort delivery."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    user.push_token = push_token
    db.commit()
    db.refresh(user)
    return user


def broadcast(db: Session, title: str, message: str, target: str) -> tuple[int, list[str]]:
    """Send an in-app notification to every user in the target group.

    Returns the number of recipients and the push tokens registered among
    them, for the caller to fan out after the commit.
    """
    if target not in BROADCAST_TARGETS:
        raise ValueError("Target must be all, students, or tutors")

    query = db.query(User)
    role = BROADCAST_TARGETS[target]
    if role:
        query = query.filter(User.role == role)
    users = query.all()

    for user in users:
        add_notification(db, user.id, title, message, category="system")
    db.commit()

    logger.info("Broadcast notification %r to %d %s users", title, len(users), target)
    return len(users), [u.push_token for u in users if u.push_token]
