"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taskflow.database import Base, get_db
from taskflow.models.comment import Comment  # noqa: F401
from taskflow.models.task import Task  # noqa: F401
from taskflow.models.user import ROLE_ADMIN, User
from taskflow.services.auth import get_auth_service


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from main import app
    from taskflow.rate_limit import limiter

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _register(db_session: Session, name: str, email: str, password: str) -> dict:
    session = get_auth_service().register(db_session, name, email, password)
    return {
        "user_id": session.user.id,
        "name": session.user.name,
        "email": session.user.email,
        "password": password,
        "token": session.token,
        "headers": {"Authorization": f"Bearer {session.token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create a regular user and return its credentials and token."""
    return _register(db_session, "Test User", "test@example.com", "password123")


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session):
    """A second regular user, for assignment and permission checks."""
    return _register(db_session, "Other User", "other@example.com", "password456")


@pytest.fixture(name="admin_user")
def admin_user_fixture(db_session: Session):
    """Create an administrator whose token already carries the admin role."""
    data = _register(db_session, "Admin User", "admin@example.com", "adminpass1")
    user = db_session.get(User, data["user_id"])
    user.role = ROLE_ADMIN
    db_session.commit()

    token = get_auth_service().jwt_service.issue(user.id, ROLE_ADMIN)
    data["token"] = token
    data["headers"] = {"Authorization": f"Bearer {token}"}
    return data
