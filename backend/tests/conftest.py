"""Shared fixtures: an isolated SQLite database per test and an API client."""

import os
import sys

# Add parent dir to path for imports, and configure before app.config loads
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["PUSH_ENABLED"] = "false"
os.environ["ADMIN_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, build_engine, get_db
from app.main import app
from app.middleware.auth import hash_password, create_access_token
from app.models import User
from app.schemas.class_request import ClassRequestCreate

PASSWORD = "secret123"
# bcrypt is deliberately slow; hash once for every fixture user
PASSWORD_HASH = hash_password(PASSWORD)

ALGEBRA = {
    "title": "Algebra I",
    "subject": "Math",
    "grade": "10",
    "location": "Colombo",
    "schedule": "Mon 5PM",
    "price": 1000,
}


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="tutor", approved=True, name=None, push_token=None) -> User:
        counter["n"] += 1
        user = User(
            email=f"{role}{counter['n']}@example.com",
            password_hash=PASSWORD_HASH,
            name=name or f"{role.title()} {counter['n']}",
            role=role,
            is_approved=approved,
            push_token=push_token,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def tutor(make_user):
    return make_user("tutor")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def algebra():
    return ClassRequestCreate(**ALGEBRA)


@pytest.fixture
def client(session_factory):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}
