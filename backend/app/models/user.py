"""User model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Boolean, Text, CheckConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")  # student | tutor | admin
    # Students are approved on registration; tutors wait for an admin
    is_approved = Column(Boolean, nullable=False, default=False)
    push_token = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("role IN ('student', 'tutor', 'admin')", name="ck_users_role"),
    )

    # Relationships
    classes = relationship("Class", back_populates="tutor", passive_deletes=True)
    class_requests = relationship(
        "ClassRequest",
        back_populates="tutor",
        foreign_keys="[ClassRequest.tutor_id]",
        passive_deletes=True,
    )
    notifications = relationship("Notification", back_populates="user", passive_deletes=True)
