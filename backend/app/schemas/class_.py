"""Class request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.class_request import ClassRequestCreate, ClassRequestResponse


class ClassCreate(ClassRequestCreate):
    """Direct class creation by an admin on behalf of a tutor."""

    tutor_id: str
    promoted: bool = False


class ClassUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    grade: Optional[str] = None
    location: Optional[str] = None
    schedule: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _no_blank_values(self):
        for name in ("title", "subject", "grade", "location", "schedule"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                raise ValueError(f"{name.capitalize()} cannot be blank")
        return self


class AdminClassUpdate(ClassUpdate):
    promoted: Optional[bool] = None
    is_active: Optional[bool] = None


class ClassResponse(BaseModel):
    id: str
    tutor_id: str
    tutor_name: Optional[str] = None
    title: str
    description: str
    subject: str
    grade: str
    location: str
    schedule: str
    price: float
    promoted: bool
    is_active: bool
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


class ClassListResponse(BaseModel):
    classes: list[ClassResponse]
    total: int
    page: int = 1
    pages: int = 1


class ApprovalResponse(BaseModel):
    message: str
    request: ClassRequestResponse
    class_: ClassResponse = Field(alias="class")

    class Config:
        populate_by_name = True
