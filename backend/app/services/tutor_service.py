"""Tutor account approval."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.services.errors import NotFoundError
from app.services.notification_service import add_notification

logger = logging.getLogger(__name__)


def _get_tutor(db: Session, tutor_id: str) -> User:
    tutor = db.query(User).filter(User.id == tutor_id, User.role == "tutor").first()
    if not tutor:
        raise NotFoundError("Tutor not found")
    return tutor


def list_tutors(db: Session, status: Optional[str] = None) -> list[User]:
    """List tutors; status is "pending", "approved" or anything else for all."""
    query = db.query(User).filter(User.role == "tutor")
    if status == "pending":
        query = query.filter(User.is_approved.is_(False))
    elif status == "approved":
        query = query.filter(User.is_approved.is_(True))
    return query.order_by(User.created_at.desc()).all()


def approve_tutor(db: Session, tutor_id: str) -> User:
    tutor = _get_tutor(db, tutor_id)
    tutor.is_approved = True
    add_notification(
        db,
        tutor.id,
        "Account Approved",
        "Your tutor account has been approved! You can now create classes.",
        category="system",
    )
    db.commit()
    db.refresh(tutor)
    logger.info("Tutor %s approved", tutor_id)
    return tutor


def reject_tutor(db: Session, tutor_id: str) -> User:
    """Keep the account but leave it unapproved."""
    tutor = _get_tutor(db, tutor_id)
    tutor.is_approved = False
    add_notification(
        db,
        tutor.id,
        "Application Rejected",
        "Your tutor application has been rejected. Please contact support for more info.",
        category="system",
    )
    db.commit()
    db.refresh(tutor)
    logger.info("Tutor %s rejected", tutor_id)
    return tutor
