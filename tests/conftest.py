"""
Postboard - Test Configuration

Pytest fixtures for authentication testing.
Provides test database, client, email notifier and user fixtures.
"""

import os

# Cheap bcrypt rounds for the test suite; must be set before settings load
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

import re
from datetime import datetime
from typing import Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from postboard.app import app
from postboard.auth.dependencies import get_notifier
from postboard.auth.models import User
from postboard.auth.notifier import EmailNotifier
from postboard.auth.password import hash_password
from postboard.auth.repository import UserRepository
from postboard.auth.reset_tokens import ResetTokenStore
from postboard.auth.service import AuthService
from postboard.auth.sessions import SessionStore
from postboard.database import get_session_factory


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"


class RecordingNotifier(EmailNotifier):
    """Email notifier that keeps messages in memory instead of sending them."""

    def __init__(self, succeed: bool = True):
        super().__init__()
        self.sent: List[Tuple[str, str]] = []
        self.succeed = succeed

    def send_reset_email(self, to_email: str, html_body: str) -> bool:
        self.sent.append((to_email, html_body))
        return self.succeed


@pytest.fixture(scope="function")
def test_engine():
    """Create a fresh test database engine for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them
    from postboard.auth.models import Session as UserSession, PasswordResetToken  # noqa: F401
    from postboard.posts.models import Post  # noqa: F401

    SQLModel.metadata.create_all(engine)

    yield engine

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(scope="function")
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(test_engine, notifier) -> Generator[TestClient, None, None]:
    """Create a test client with fresh database and recording notifier."""
    app.state.db_engine = test_engine
    app.state.db_session_factory = get_session_factory(test_engine)
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def auth_service(db_session, notifier) -> AuthService:
    """Auth service wired directly to the test database."""
    return AuthService(
        users=UserRepository(db_session),
        sessions=SessionStore(db_session),
        reset_tokens=ResetTokenStore(db_session),
        notifier=notifier,
    )


@pytest.fixture(scope="function")
def alice(db_session) -> User:
    """Create a registered user alice / secret1."""
    now = datetime.utcnow()
    user = User(
        username="alice",
        email="alice@example.com",
        password_hash=hash_password("secret1"),
        created_at=now,
        updated_at=now,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def register_user(client: TestClient, username: str, email: str, password: str) -> dict:
    """Helper function to register and return the response body."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    return response.json()


def login_user(client: TestClient, username_or_email: str, password: str) -> dict:
    """Helper function to login and return the response body."""
    response = client.post(
        "/api/v1/auth/login",
        json={"usernameOrEmail": username_or_email, "password": password},
    )
    return response.json()


def extract_reset_token(html_body: str) -> Optional[str]:
    """Pull the raw token out of a reset email body."""
    match = re.search(r"/change-password/([^\"]+)\"", html_body)
    return match.group(1) if match else None
