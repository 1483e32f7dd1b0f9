"""Tutor router — class requests and the tutor's own classes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.class_ import ClassUpdate, ClassResponse
from app.schemas.class_request import (
    ClassRequestCreate,
    ClassRequestResponse,
    ClassRequestSubmitResponse,
)
from app.middleware.auth import require_tutor, require_approved_tutor
from app.routers.responses import class_request_response, class_response
from app.services import class_service, moderation_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/api/tutor", tags=["tutor"])


@router.get("/class-requests", response_model=list[ClassRequestResponse])
def list_my_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_tutor),
):
    """List the tutor's class requests, newest first."""
    requests = moderation_service.list_requests_for_tutor(db, current_user.id)
    return [class_request_response(r) for r in requests]


@router.post("/class-requests", response_model=ClassRequestSubmitResponse, status_code=202)
def submit_request(
    req: ClassRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_approved_tutor),
):
    """Propose a class for admin approval."""
    try:
        request = moderation_service.submit_request(db, current_user.id, req)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ClassRequestSubmitResponse(
        message="Class request submitted for admin approval",
        request=class_request_response(request),
    )


@router.delete("/class-requests/{request_id}")
def withdraw_request(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_tutor),
):
    """Withdraw one of the tutor's own pending requests."""
    try:
        moderation_service.withdraw(db, request_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Request deleted"}


@router.get("/classes", response_model=list[ClassResponse])
def list_my_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_tutor),
):
    return [class_response(c) for c in class_service.list_for_tutor(db, current_user.id)]


@router.put("/classes/{class_id}", response_model=ClassResponse)
def update_my_class(
    class_id: str,
    req: ClassUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_tutor),
):
    try:
        cls = class_service.update_own_class(db, class_id, current_user.id, req)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return class_response(cls)


@router.delete("/classes/{class_id}")
def delete_my_class(
    class_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_tutor),
):
    try:
        class_service.delete_own_class(db, class_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Class deleted"}
