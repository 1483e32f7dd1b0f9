"""Admin router — class request moderation, tutor approval, class management."""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.class_ import ClassCreate, AdminClassUpdate, ClassResponse, ApprovalResponse
from app.schemas.class_request import ClassRequestReject, ClassRequestResponse
from app.middleware.auth import require_admin
from app.routers.responses import class_request_response, class_response, user_response
from app.services import class_service, moderation_service, push_service, tutor_service
from app.services.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _moderation_error(e: ValueError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# ── Class requests ──────────────────────────────────────────────────────────

@router.get("/class-requests", response_model=list[ClassRequestResponse])
def list_class_requests(
    status: str = Query("pending"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """List class requests by status (pending | approved | rejected | all)."""
    try:
        requests = moderation_service.list_requests(db, status=status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [class_request_response(r) for r in requests]


@router.post(
    "/class-requests/{request_id}/approve",
    response_model=ApprovalResponse,
    response_model_by_alias=True,
)
def approve_class_request(
    request_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Approve a pending request and create its class."""
    try:
        request, cls = moderation_service.approve(db, request_id, current_user.id)
    except ValueError as e:
        raise _moderation_error(e)

    # Push only after the commit above; plain strings only
    background_tasks.add_task(
        push_service.send_push_to_user,
        request.tutor.push_token,
        moderation_service.APPROVED_TITLE,
        moderation_service.approved_message(cls.title),
    )
    return ApprovalResponse(
        message="Request approved",
        request=class_request_response(request),
        class_=class_response(cls),
    )


@router.post("/class-requests/{request_id}/reject")
def reject_class_request(
    request_id: str,
    background_tasks: BackgroundTasks,
    req: Optional[ClassRequestReject] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Reject a pending request with an optional note."""
    note = req.note if req else None
    try:
        request = moderation_service.reject(db, request_id, current_user.id, note)
    except ValueError as e:
        raise _moderation_error(e)

    background_tasks.add_task(
        push_service.send_push_to_user,
        request.tutor.push_token,
        moderation_service.REJECTED_TITLE,
        moderation_service.rejected_message(request.title, note),
    )
    return {"message": "Request rejected", "request": class_request_response(request)}


# ── Tutors ──────────────────────────────────────────────────────────────────

@router.get("/tutors", response_model=list[UserResponse])
def list_tutors(
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return [user_response(t) for t in tutor_service.list_tutors(db, status=status)]


@router.post("/tutors/{tutor_id}/approve")
def approve_tutor(
    tutor_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        tutor = tutor_service.approve_tutor(db, tutor_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    background_tasks.add_task(
        push_service.send_push_to_user,
        tutor.push_token,
        "Account Approved",
        "Your tutor account has been approved! You can now create classes.",
    )
    return {"message": "Tutor approved", "tutor": user_response(tutor)}


@router.post("/tutors/{tutor_id}/reject")
def reject_tutor(
    tutor_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        tutor = tutor_service.reject_tutor(db, tutor_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Tutor rejected", "tutor": user_response(tutor)}


# ── Classes ─────────────────────────────────────────────────────────────────

@router.get("/classes", response_model=list[ClassResponse])
def list_classes(
    q: Optional[str] = Query(None),
    grade: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    tutor: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    classes = class_service.list_all(db, q=q, grade=grade, location=location, tutor=tutor)
    return [class_response(c) for c in classes]


@router.post("/classes", response_model=ClassResponse, status_code=201)
def create_class(
    req: ClassCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create a class for a tutor directly, without a class request."""
    try:
        cls = class_service.create_class(db, req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return class_response(cls)


@router.put("/classes/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: str,
    req: AdminClassUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        cls = class_service.update_class(db, class_id, req)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return class_response(cls)


@router.delete("/classes/{class_id}")
def delete_class(
    class_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        removed = class_service.delete_class(db, class_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Class removed", "class": removed}
