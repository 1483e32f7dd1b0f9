"""Class request request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

# Checked in this order so the error always names the first missing field
REQUIRED_CLASS_FIELDS = ("title", "subject", "grade", "location", "schedule")


def _require_fields(model: BaseModel, fields: tuple) -> None:
    for name in fields:
        value = getattr(model, name)
        if value is None or not value.strip():
            raise ValueError(f"{name.capitalize()} is required")
        setattr(model, name, value.strip())


class ClassRequestCreate(BaseModel):
    """Fields a tutor submits when proposing a class.

    Required fields are typed optional so that a missing and a blank value
    both produce the same single "<Field> is required" error.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    grade: Optional[str] = None
    location: Optional[str] = None
    schedule: Optional[str] = None
    price: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_required(self):
        _require_fields(self, REQUIRED_CLASS_FIELDS)
        if self.description is None:
            self.description = ""
        return self


class ClassRequestReject(BaseModel):
    note: Optional[str] = None


class ClassRequestResponse(BaseModel):
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
    status: str
    review_note: Optional[str]
    reviewed_by: Optional[str]
    reviewed_at: Optional[str]
    class_id: Optional[str]
    created_at: str

    class Config:
        from_attributes = True


class ClassRequestSubmitResponse(BaseModel):
    message: str
    request: ClassRequestResponse
