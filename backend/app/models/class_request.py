"""ClassRequest model — a tutor's proposal awaiting moderation.

Status moves pending -> approved | rejected exactly once. The review columns
(`reviewed_by`, `reviewed_at`, `class_id`, `review_note`) only carry meaning
for the matching status, so the table CHECK constraint pins their nullability
to the status and `ClassRequest.review` exposes them as a tagged variant.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Text, CheckConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


@dataclass(frozen=True)
class PendingReview:
    status = RequestStatus.pending


@dataclass(frozen=True)
class ApprovedReview:
    class_id: str
    reviewed_by: str
    reviewed_at: datetime
    status = RequestStatus.approved


@dataclass(frozen=True)
class RejectedReview:
    reviewed_by: str
    reviewed_at: datetime
    note: Optional[str] = None
    status = RequestStatus.rejected


Review = Union[PendingReview, ApprovedReview, RejectedReview]


class ClassRequest(Base):
    __tablename__ = "class_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tutor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    subject = Column(String(100), nullable=False)
    grade = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False)
    schedule = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default=RequestStatus.pending.value, index=True)
    review_note = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    # Id of the class materialised on approval. Kept as a plain reference so it
    # survives the class being deleted later.
    class_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_class_requests_status",
        ),
        CheckConstraint(
            "(status = 'pending' AND reviewed_by IS NULL AND reviewed_at IS NULL "
            "AND class_id IS NULL AND review_note IS NULL)"
            " OR (status = 'approved' AND reviewed_by IS NOT NULL "
            "AND reviewed_at IS NOT NULL AND class_id IS NOT NULL)"
            " OR (status = 'rejected' AND reviewed_by IS NOT NULL "
            "AND reviewed_at IS NOT NULL AND class_id IS NULL)",
            name="ck_class_requests_review_fields",
        ),
    )

    # Relationships
    tutor = relationship("User", back_populates="class_requests", foreign_keys=[tutor_id])

    @property
    def review(self) -> Review:
        """The review outcome, carrying only the fields valid for the status."""
        status = RequestStatus(self.status)
        if status is RequestStatus.approved:
            return ApprovedReview(
                class_id=self.class_id,
                reviewed_by=self.reviewed_by,
                reviewed_at=self.reviewed_at,
            )
        if status is RequestStatus.rejected:
            return RejectedReview(
                reviewed_by=self.reviewed_by,
                reviewed_at=self.reviewed_at,
                note=self.review_note,
            )
        return PendingReview()

    @property
    def is_pending(self) -> bool:
        return isinstance(self.review, PendingReview)
