"""Auth request/response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    role: Literal["student", "tutor"] = "student"
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: str
    email: str
    role: str
    name: str
    is_approved: bool
    created_at: str

    class Config:
        from_attributes = True
