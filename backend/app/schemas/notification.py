"""Notification request/response schemas."""

from typing import Literal

from pydantic import BaseModel, field_validator


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    category: str
    read: bool
    created_at: str

    class Config:
        from_attributes = True


class PushTokenRegister(BaseModel):
    push_token: str

    @field_validator("push_token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Push token is required")
        return value.strip()


class NotificationSend(BaseModel):
    title: str
    message: str
    target: Literal["all", "students", "tutors"]

    @field_validator("title", "message")
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return value.strip()


class NotificationSendResponse(BaseModel):
    message: str
    count: int
