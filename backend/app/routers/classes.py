"""Classes router — public listing of live classes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.class_ import ClassResponse, ClassListResponse
from app.routers.responses import class_response
from app.services import class_service
from app.services.errors import NotFoundError

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("", response_model=ClassListResponse)
def list_classes(
    subject: Optional[str] = Query(None),
    grade: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Search active classes. Promoted classes come first."""
    result = class_service.search_classes(
        db,
        subject=subject,
        grade=grade,
        location=location,
        search=search,
        page=page,
        limit=limit,
    )
    return ClassListResponse(
        classes=[class_response(c) for c in result["classes"]],
        total=result["total"],
        page=result["page"],
        pages=result["pages"],
    )


@router.get("/{class_id}", response_model=ClassResponse)
def get_class(class_id: str, db: Session = Depends(get_db)):
    try:
        return class_response(class_service.get_active_class(db, class_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
