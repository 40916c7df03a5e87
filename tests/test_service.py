"""
Postboard - Auth Service Tests

Unit tests for AuthService with explicit session contexts, plus
failure handling for storage and email errors.

Run with: pytest tests/test_service.py
"""

import logging
from unittest.mock import AsyncMock

import pytest
from sqlmodel import select

from postboard.auth.errors import StorageUnavailableError
from postboard.auth.models import PasswordResetToken, User
from postboard.auth.notifier import EmailNotifier, build_reset_link
from postboard.auth.sessions import SessionContext
from postboard.auth.validation import validate_new_password, validate_register
from postboard.config import Settings, settings
from tests.conftest import extract_reset_token


class TestValidation:
    """Tests for input rules."""

    def test_valid_registration(self):
        assert validate_register("alice", "alice@example.com", "secret1") is None

    def test_email_checked_first(self):
        errors = validate_register("a", "bad", "x")

        assert [e.field for e in errors] == ["email"]

    def test_boundary_lengths(self):
        assert validate_register("abc", "a@b", "abcd") is None
        assert validate_register("ab", "a@b", "abcd")[0].field == "username"
        assert validate_register("abc", "a@b", "abc")[0].field == "password"

    def test_new_password_length(self):
        assert validate_new_password("abcd") is None
        assert validate_new_password("abc")[0].field == "newPassword"


class TestAuthService:
    """Tests for AuthService operations against a real test database."""

    @pytest.mark.asyncio
    async def test_register_binds_session(self, auth_service):
        session = SessionContext()

        result = await auth_service.register(session, "alice", "alice@example.com", "secret1")

        assert result.errors is None
        assert session.user_id == result.user.id
        assert session.modified is True

    @pytest.mark.asyncio
    async def test_register_conflict_leaves_session_anonymous(self, auth_service, alice):
        session = SessionContext()

        result = await auth_service.register(session, "alice", "new@example.com", "secret1")

        assert result.user is None
        assert result.errors[0].field == "username"
        assert session.user_id is None
        assert session.modified is False

    @pytest.mark.asyncio
    async def test_register_validation_skips_storage(self, auth_service):
        auth_service.users.create = AsyncMock()

        result = await auth_service.register(SessionContext(), "alice", "alice@example.com", "abc")

        assert result.errors[0].field == "password"
        auth_service.users.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_wrong_password_keeps_session_anonymous(self, auth_service, alice):
        session = SessionContext()

        result = await auth_service.login(session, "alice", "wrongpass")

        assert result.errors[0].field == "password"
        assert session.user_id is None

    @pytest.mark.asyncio
    async def test_login_upgrades_weak_hash(self, auth_service, db_session, alice, monkeypatch):
        monkeypatch.setattr(settings, "BCRYPT_WORK_FACTOR", 5)

        result = await auth_service.login(SessionContext(), "alice", "secret1")

        assert result.user is not None
        db_session.expire_all()
        stored = db_session.get(User, alice.id)
        assert stored.password_hash.startswith("$2b$05$")

    @pytest.mark.asyncio
    async def test_me(self, auth_service, alice):
        assert await auth_service.me(SessionContext()) is None
        assert (await auth_service.me(SessionContext(user_id=alice.id))).id == alice.id
        assert await auth_service.me(SessionContext(user_id=999)) is None

    @pytest.mark.asyncio
    async def test_logout_returns_false_when_store_fails(self, auth_service, alice):
        session = SessionContext(user_id=alice.id)
        auth_service.sessions.destroy = AsyncMock(side_effect=StorageUnavailableError())

        assert await auth_service.logout(session) is False

    @pytest.mark.asyncio
    async def test_logout_unbinds_user(self, auth_service, alice):
        session = SessionContext()
        await auth_service.login(session, "alice", "secret1")
        await auth_service.sessions.save(session)

        assert await auth_service.logout(session) is True
        assert session.user_id is None

    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email(self, auth_service, notifier, db_session):
        assert await auth_service.forgot_password("nobody@example.com") is True
        assert notifier.sent == []
        assert db_session.exec(select(PasswordResetToken)).all() == []

    @pytest.mark.asyncio
    async def test_change_password_redeems_once(self, auth_service, notifier, alice):
        await auth_service.forgot_password("alice@example.com")
        token = extract_reset_token(notifier.sent[0][1])

        session = SessionContext()
        first = await auth_service.change_password(session, token, "newpass1")
        second = await auth_service.change_password(SessionContext(), token, "newpass2")

        assert first.user.id == alice.id
        assert session.user_id == alice.id
        assert second.errors[0].message == "token expired"

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, auth_service):
        auth_service.users.find_by_username = AsyncMock(side_effect=StorageUnavailableError())

        with pytest.raises(StorageUnavailableError):
            await auth_service.login(SessionContext(), "alice", "secret1")


class TestFatalErrors:
    """Storage failures reach the client as a generic 503."""

    def test_storage_failure_returns_503(self, client, monkeypatch):
        from postboard.auth.repository import UserRepository

        monkeypatch.setattr(
            UserRepository,
            "find_by_username",
            AsyncMock(side_effect=StorageUnavailableError()),
        )

        response = client.post(
            "/api/v1/auth/login",
            json={"usernameOrEmail": "alice", "password": "secret1"},
        )

        assert response.status_code == 503
        assert response.json() == {"detail": "Service temporarily unavailable"}


class TestEmailNotifier:
    """SMTP notifier behavior with delivery disabled."""

    def test_disabled_smtp_never_logs_link(self, caplog):
        notifier = EmailNotifier(Settings(SMTP_ENABLED=False))
        body = build_reset_link("http://localhost:3000", "raw-token-value")

        with caplog.at_level(logging.DEBUG, logger="postboard.auth.notifier"):
            assert notifier.send_reset_email("alice@example.com", body) is True

        assert "alice@example.com" in caplog.text
        assert "raw-token-value" not in caplog.text
