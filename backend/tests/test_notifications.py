"""Tests for the in-app notification log."""

from datetime import datetime, timedelta, timezone

import pytest

from app.models import Notification
from app.services import notification_service
from app.services.errors import NotFoundError


class TestAppend:
    """Appending to a user's log."""

    def test_append_is_unread(self, db, tutor):
        """New notifications start unread in the general category."""
        notification = notification_service.append(db, tutor.id, "Hello", "Welcome aboard")

        assert notification.read is False
        assert notification.category == "general"
        assert notification.user_id == tutor.id

    def test_append_for_unknown_user(self, db):
        """Appending for a missing user is not found and stores nothing."""
        with pytest.raises(NotFoundError, match="User not found"):
            notification_service.append(db, "missing", "Hello", "Nobody home")

        assert db.query(Notification).count() == 0


class TestMarkRead:
    """Read receipts."""

    def test_owner_marks_read(self, db, tutor):
        """The recipient can mark a notification read."""
        notification = notification_service.append(db, tutor.id, "Hello", "Welcome")

        updated = notification_service.mark_read(db, notification.id, tutor.id)

        assert updated.read is True

    def test_mark_read_is_idempotent(self, db, tutor):
        """Marking twice is harmless."""
        notification = notification_service.append(db, tutor.id, "Hello", "Welcome")

        notification_service.mark_read(db, notification.id, tutor.id)
        again = notification_service.mark_read(db, notification.id, tutor.id)

        assert again.read is True

    def test_foreign_notification_looks_missing(self, db, tutor, make_user):
        """Someone else's notification is not found and stays unread."""
        other = make_user("student")
        notification = notification_service.append(db, tutor.id, "Hello", "Welcome")

        with pytest.raises(NotFoundError, match="Notification not found"):
            notification_service.mark_read(db, notification.id, other.id)

        db.expire_all()
        assert db.query(Notification).filter(Notification.id == notification.id).one().read is False

    def test_unknown_notification(self, db, tutor):
        """A missing notification is not found."""
        with pytest.raises(NotFoundError, match="Notification not found"):
            notification_service.mark_read(db, "missing", tutor.id)


class TestListing:
    """Inbox listing."""

    def _seed(self, db, user_id, count):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in range(count):
            db.add(Notification(
                user_id=user_id,
                title=f"n{i}",
                message="m",
                created_at=start + timedelta(minutes=i),
            ))
        db.commit()

    def test_newest_first(self, db, tutor):
        """The newest notification is listed first."""
        self._seed(db, tutor.id, 3)

        titles = [n.title for n in notification_service.list_for_user(db, tutor.id)]

        assert titles == ["n2", "n1", "n0"]

    def test_limit(self, db, tutor):
        """The limit keeps only the most recent entries."""
        self._seed(db, tutor.id, 5)

        titles = [n.title for n in notification_service.list_for_user(db, tutor.id, limit=2)]

        assert titles == ["n4", "n3"]

    def test_scoped_to_user(self, db, tutor, make_user):
        """Other users' notifications are not listed."""
        other = make_user("tutor")
        self._seed(db, other.id, 2)

        assert notification_service.list_for_user(db, tutor.id) == []


class TestPushToken:
    """Device token registration."""

    def test_register_push_token(self, db, tutor):
        """The token is stored on the user."""
        user = notification_service.register_push_token(db, tutor.id, "ExponentPushToken[abc]")
        assert user.push_token == "ExponentPushToken[abc]"

    def test_register_for_unknown_user(self, db):
        """A missing user is not found."""
        with pytest.raises(NotFoundError):
            notification_service.register_push_token(db, "missing", "ExponentPushToken[abc]")


class TestBroadcast:
    """Admin broadcasts by audience."""

    @pytest.fixture
    def population(self, make_user):
        return {
            "student": make_user("student", push_token="ExponentPushToken[student]"),
            "tutor": make_user("tutor"),
            "admin": make_user("admin", push_token="ExponentPushToken[admin]"),
        }

    def test_broadcast_to_all(self, db, population):
        """Everyone is notified and every registered token is returned."""
        count, tokens = notification_service.broadcast(db, "Maintenance", "Back soon", "all")

        assert count == 3
        assert sorted(tokens) == ["ExponentPushToken[admin]", "ExponentPushToken[student]"]
        assert db.query(Notification).count() == 3

    def test_broadcast_to_tutors(self, db, population):
        """Only tutors are notified."""
        count, tokens = notification_service.broadcast(db, "Payouts", "Sent", "tutors")

        assert count == 1
        assert tokens == []
        only = db.query(Notification).one()
        assert only.user_id == population["tutor"].id
        assert only.category == "system"

    def test_broadcast_to_students(self, db, population):
        """Only students are notified and pushed."""
        count, tokens = notification_service.broadcast(db, "Exams", "Good luck", "students")

        assert count == 1
        assert tokens == ["ExponentPushToken[student]"]

    def test_unknown_target(self, db, population):
        """An unknown audience is refused."""
        with pytest.raises(ValueError):
            notification_service.broadcast(db, "Hi", "There", "admins")
