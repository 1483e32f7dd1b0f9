"""SQLAlchemy ORM models."""

from app.models.user import User
from app.models.class_ import Class
from app.models.class_request import ClassRequest, RequestStatus
from app.models.notification import Notification
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "Class",
    "ClassRequest",
    "RequestStatus",
    "Notification",
    "AuditLog",
]
