"""Moderation service — class request lifecycle.

    submit           approve(reviewer)
    (none) -----> pending ---------------------> approved  (terminal)
                     |    reject(reviewer, note)
                     +-------------------------> rejected  (terminal)
                     |    withdraw(owner)
                     +-------------------------> (deleted)

Leaving `pending` is a compare-and-set: the UPDATE/DELETE is conditioned on
the stored status still being pending, so when two admins race only one of
them affects a row. The loser rolls back everything it staged (including the
class it inserted) and gets a ConflictError.

Role checks happen in the routers; every function here trusts its caller ids.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.models.class_ import Class
from app.models.class_request import ClassRequest, RequestStatus
from app.models.user import User
from app.schemas.class_request import ClassRequestCreate
from app.services.errors import ConflictError, NotFoundError
from app.services.notification_service import add_notification

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "Request already reviewed"

# Copied verbatim from the request onto the class at approval time
COPIED_FIELDS = ("title", "description", "subject", "grade", "location", "schedule", "price")


APPROVED_TITLE = "Class Approved"
REJECTED_TITLE = "Class Rejected"


def approved_message(title: str) -> str:
    return f'Your class "{title}" has been approved and added.'


def rejected_message(title: str, note: Optional[str] = None) -> str:
    message = f'Your class "{title}" was rejected.'
    if note:
        message += f" Reason: {note}"
    return message


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _record_audit(
    db: Session,
    request_id: str,
    action: str,
    actor_id: str,
    old_data: Optional[dict] = None,
    new_data: Optional[dict] = None,
) -> None:
    db.add(AuditLog(
        entity_type="class_request",
        entity_id=request_id,
        action=action,
        actor_id=actor_id,
        old_data=json.dumps(old_data) if old_data is not None else None,
        new_data=json.dumps(new_data) if new_data is not None else None,
    ))


def _close_review(db: Session, request_id: str, values: dict) -> bool:
    """Move a request out of pending. False if it had already left pending."""
    updated = (
        db.query(ClassRequest)
        .filter(
            ClassRequest.id == request_id,
            ClassRequest.status == RequestStatus.pending.value,
        )
        .update(values, synchronize_session=False)
    )
    return updated == 1


def _get_reviewable(db: Session, request_id: str) -> ClassRequest:
    request = get_request(db, request_id)
    if not request.is_pending:
        raise ConflictError(ALREADY_REVIEWED)
    return request


def submit_request(db: Session, tutor_id: str, fields: ClassRequestCreate) -> ClassRequest:
    """Create a pending class request for a tutor."""
    tutor = db.query(User).filter(User.id == tutor_id).first()
    if not tutor:
        raise NotFoundError("Tutor not found")

    request = ClassRequest(
        tutor_id=tutor_id,
        title=fields.title,
        description=fields.description or "",
        subject=fields.subject,
        grade=fields.grade,
        location=fields.location,
        schedule=fields.schedule,
        price=fields.price,
        status=RequestStatus.pending.value,
    )
    db.add(request)
    db.flush()

    _record_audit(
        db,
        request.id,
        "submitted",
        tutor_id,
        new_data={"title": request.title, "subject": request.subject, "price": request.price},
    )
    db.commit()
    db.refresh(request)

    logger.info("Class request %s submitted by tutor %s", request.id, tutor_id)
    return request


def get_request(db: Session, request_id: str) -> ClassRequest:
    request = db.query(ClassRequest).filter(ClassRequest.id == request_id).first()
    if not request:
        raise NotFoundError("Request not found")
    return request


def list_requests(db: Session, status: Optional[str] = "pending") -> list[ClassRequest]:
    """List requests for moderation. `status` of None or "all" lists everything."""
    query = db.query(ClassRequest)
    if status and status != "all":
        try:
            status = RequestStatus(status).value
        except ValueError:
            raise ValueError(f"Invalid status '{status}'") from None
        query = query.filter(ClassRequest.status == status)
    return query.order_by(ClassRequest.created_at.desc()).all()


def list_requests_for_tutor(db: Session, tutor_id: str) -> list[ClassRequest]:
    return (
        db.query(ClassRequest)
        .filter(ClassRequest.tutor_id == tutor_id)
        .order_by(ClassRequest.created_at.desc())
        .all()
    )


def approve(db: Session, request_id: str, reviewer_id: str) -> tuple[ClassRequest, Class]:
    """Approve a pending request and materialise its class.

    The class insert, the conditional request update, the tutor notification
    and the audit row commit together. The class is flushed before the
    request is stamped, so storage without transactions could at worst leave
    an unreferenced class behind, never an approved request without one.
    """
    request = _get_reviewable(db, request_id)

    cls = Class(
        tutor_id=request.tutor_id,
        **{name: getattr(request, name) for name in COPIED_FIELDS},
    )
    db.add(cls)
    db.flush()

    reviewed_at = _now()
    closed = _close_review(db, request_id, {
        ClassRequest.status: RequestStatus.approved.value,
        ClassRequest.reviewed_by: reviewer_id,
        ClassRequest.reviewed_at: reviewed_at,
        ClassRequest.class_id: cls.id,
    })
    if not closed:
        db.rollback()
        logger.warning("Approval of class request %s lost to a concurrent review", request_id)
        raise ConflictError(ALREADY_REVIEWED)

    add_notification(
        db,
        request.tutor_id,
        APPROVED_TITLE,
        approved_message(cls.title),
        category="system",
    )
    _record_audit(
        db,
        request_id,
        "approved",
        reviewer_id,
        old_data={"status": RequestStatus.pending.value},
        new_data={"status": RequestStatus.approved.value, "class_id": cls.id},
    )
    db.commit()
    db.refresh(request)
    db.refresh(cls)

    logger.info("Class request %s approved by %s as class %s", request_id, reviewer_id, cls.id)
    return request, cls


def reject(
    db: Session,
    request_id: str,
    reviewer_id: str,
    note: Optional[str] = None,
) -> ClassRequest:
    """Reject a pending request. No class is created."""
    request = _get_reviewable(db, request_id)

    closed = _close_review(db, request_id, {
        ClassRequest.status: RequestStatus.rejected.value,
        ClassRequest.review_note: note,
        ClassRequest.reviewed_by: reviewer_id,
        ClassRequest.reviewed_at: _now(),
    })
    if not closed:
        db.rollback()
        logger.warning("Rejection of class request %s lost to a concurrent review", request_id)
        raise ConflictError(ALREADY_REVIEWED)

    add_notification(
        db,
        request.tutor_id,
        REJECTED_TITLE,
        rejected_message(request.title, note),
        category="system",
    )
    _record_audit(
        db,
        request_id,
        "rejected",
        reviewer_id,
        old_data={"status": RequestStatus.pending.value},
        new_data={"status": RequestStatus.rejected.value, "note": note},
    )
    db.commit()
    db.refresh(request)

    logger.info("Class request %s rejected by %s", request_id, reviewer_id)
    return request


def withdraw(db: Session, request_id: str, tutor_id: str) -> None:
    """Delete the tutor's own pending request.

    Missing, foreign and already-reviewed requests all raise the same
    NotFoundError.
    """
    deleted = (
        db.query(ClassRequest)
        .filter(
            ClassRequest.id == request_id,
            ClassRequest.tutor_id == tutor_id,
            ClassRequest.status == RequestStatus.pending.value,
        )
        .delete(synchronize_session="fetch")
    )
    if deleted == 0:
        db.rollback()
        raise NotFoundError("Request not found")

    _record_audit(db, request_id, "withdrawn", tutor_id, old_data={"status": RequestStatus.pending.value})
    db.commit()
    logger.info("Class request %s withdrawn by tutor %s", request_id, tutor_id)
