"""
Pytest Configuration and Shared Fixtures

- Point the app at an in-memory SQLite database before any import
- Fresh schema per test
- TestClient wired to the test session
- Helpers to create users and obtain bearer tokens
"""

import os

# Must run before task_tracker is imported: settings and engine are module level
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum bcrypt cost keeps the suite fast
os.environ["AUTO_CREATE_TABLES"] = "false"

from typing import Dict  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from task_tracker.database import Base, SessionLocal, engine, get_db  # noqa: E402
from task_tracker.main import app  # noqa: E402
from task_tracker.models import User, UserRole  # noqa: E402
from task_tracker.repositories import TaskRepository, UserRepository  # noqa: E402
from task_tracker.services import IdentityService, TaskService  # noqa: E402

API = "/api/v1"
PASSWORD = "secret123"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture()
def db_session():
    """Session on a freshly created schema, dropped after the test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    """TestClient whose requests share the test session."""

    def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def identity(db_session) -> IdentityService:
    return IdentityService(UserRepository(db_session))


@pytest.fixture()
def task_service(db_session) -> TaskService:
    return TaskService(TaskRepository(db_session))


@pytest.fixture()
def make_user(identity):
    """Create a user directly through the service layer."""
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.USER, name: str = None, email: str = None) -> User:
        counter["n"] += 1
        email = email or f"{role.value}{counter['n']}@example.com"
        name = name or f"{role.value.title()} {counter['n']}"
        if role == UserRole.ADMIN:
            user, _ = identity.seed_admin(name, email, PASSWORD)
        else:
            user, _ = identity.register(name, email, PASSWORD)
        return user

    return _make


@pytest.fixture()
def auth_headers(identity):
    """Bearer header for a given user."""

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {identity.issue_token(user)}"}

    return _headers


@pytest.fixture()
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN, name="Alice Admin", email="alice@example.com")


@pytest.fixture()
def member(make_user) -> User:
    return make_user(UserRole.USER, name="Uma User", email="uma@example.com")
