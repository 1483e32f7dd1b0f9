"""Class service — listing and direct CRUD on live classes."""

import logging
import math
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.class_ import Class
from app.models.user import User
from app.schemas.class_ import ClassCreate, ClassUpdate, AdminClassUpdate
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _apply_updates(cls: Class, fields: ClassUpdate) -> None:
    for name, value in fields.model_dump(exclude_none=True).items():
        setattr(cls, name, value.strip() if isinstance(value, str) else value)


def _like(value: str) -> str:
    return f"%{value.strip()}%"


def search_classes(
    db: Session,
    subject: Optional[str] = None,
    grade: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> dict:
    """Public listing of active classes, promoted first then newest."""
    query = db.query(Class).filter(Class.is_active.is_(True))
    if subject:
        query = query.filter(Class.subject.ilike(_like(subject)))
    if grade:
        query = query.filter(Class.grade.ilike(_like(grade)))
    if location:
        query = query.filter(Class.location.ilike(_like(location)))
    if search:
        pattern = _like(search)
        query = query.filter(or_(
            Class.title.ilike(pattern),
            Class.description.ilike(pattern),
            Class.subject.ilike(pattern),
        ))

    total = query.count()
    classes = (
        query.order_by(Class.promoted.desc(), Class.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "classes": classes,
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if total else 0,
    }


def get_active_class(db: Session, class_id: str) -> Class:
    cls = db.query(Class).filter(Class.id == class_id, Class.is_active.is_(True)).first()
    if not cls:
        raise NotFoundError("Class not found")
    return cls


def list_for_tutor(db: Session, tutor_id: str) -> list[Class]:
    return (
        db.query(Class)
        .filter(Class.tutor_id == tutor_id)
        .order_by(Class.created_at.desc())
        .all()
    )


def list_all(
    db: Session,
    q: Optional[str] = None,
    grade: Optional[str] = None,
    location: Optional[str] = None,
    tutor: Optional[str] = None,
) -> list[Class]:
    """Admin listing, including inactive classes."""
    query = db.query(Class).join(User, Class.tutor_id == User.id)
    if q:
        pattern = _like(q)
        query = query.filter(or_(
            Class.title.ilike(pattern),
            Class.description.ilike(pattern),
            Class.subject.ilike(pattern),
        ))
    if grade:
        query = query.filter(Class.grade.ilike(_like(grade)))
    if location:
        query = query.filter(Class.location.ilike(_like(location)))
    if tutor:
        query = query.filter(User.name.ilike(_like(tutor)))
    return query.order_by(Class.created_at.desc()).all()


def create_class(db: Session, fields: ClassCreate) -> Class:
    """Create a class directly, bypassing the request workflow (admin only)."""
    tutor = db.query(User).filter(User.id == fields.tutor_id, User.role == "tutor").first()
    if not tutor:
        raise ValueError("tutor_id must belong to a tutor")

    cls = Class(
        tutor_id=tutor.id,
        title=fields.title,
        description=fields.description or "",
        subject=fields.subject,
        grade=fields.grade,
        location=fields.location,
        schedule=fields.schedule,
        price=fields.price,
        promoted=fields.promoted,
    )
    db.add(cls)
    db.commit()
    db.refresh(cls)
    logger.info("Class %s created directly for tutor %s", cls.id, tutor.id)
    return cls


def update_own_class(db: Session, class_id: str, tutor_id: str, fields: ClassUpdate) -> Class:
    cls = db.query(Class).filter(Class.id == class_id, Class.tutor_id == tutor_id).first()
    if not cls:
        raise NotFoundError("Class not found")
    _apply_updates(cls, fields)
    db.commit()
    db.refresh(cls)
    return cls


def delete_own_class(db: Session, class_id: str, tutor_id: str) -> None:
    deleted = (
        db.query(Class)
        .filter(Class.id == class_id, Class.tutor_id == tutor_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        db.rollback()
        raise NotFoundError("Class not found")
    db.commit()


def update_class(db: Session, class_id: str, fields: AdminClassUpdate) -> Class:
    cls = db.query(Class).filter(Class.id == class_id).first()
    if not cls:
        raise NotFoundError("Class not found")
    _apply_updates(cls, fields)
    db.commit()
    db.refresh(cls)
    return cls


def delete_class(db: Session, class_id: str) -> dict:
    """Remove any class. Returns the id and title of the removed row."""
    cls = db.query(Class).filter(Class.id == class_id).first()
    if not cls:
        raise NotFoundError("Class not found")
    removed = {"id": cls.id, "title": cls.title}
    db.delete(cls)
    db.commit()
    logger.info("Class %s removed by admin", class_id)
    return removed
