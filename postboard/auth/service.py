"""
Postboard - Auth Service

Orchestrates registration, login, logout, forgot-password and
change-password over the user repository, session context, reset token
store, password hasher and email notifier.

Every operation takes the caller's SessionContext explicitly. Expected
failures come back as AuthResponse field errors; only storage failures
(FatalError, SQLAlchemyError) propagate.

bcrypt runs in the threadpool so slow hashes do not block the event loop.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from postboard.auth.errors import ConflictError, FatalError
from postboard.auth.models import User
from postboard.auth.notifier import EmailNotifier, build_reset_link
from postboard.auth.password import hash_password, needs_rehash, verify_password
from postboard.auth.repository import UserRepository
from postboard.auth.reset_tokens import ResetTokenStore, generate_reset_token
from postboard.auth.schemas import AuthResponse, UserResponse
from postboard.auth.sessions import SessionContext, SessionStore
from postboard.auth.validation import validate_new_password, validate_register
from postboard.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication and credential-recovery flows."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionStore,
        reset_tokens: ResetTokenStore,
        notifier: EmailNotifier,
        settings: Settings = default_settings,
    ):
        self.users = users
        self.sessions = sessions
        self.reset_tokens = reset_tokens
        self.notifier = notifier
        self.settings = settings

    def _success(self, user: User) -> AuthResponse:
        return AuthResponse(user=UserResponse.model_validate(user))

    async def me(self, session: SessionContext) -> Optional[User]:
        """Return the session's user, or None if anonymous or the user is gone."""
        if not session.is_authenticated:
            return None
        return await self.users.find_by_id(session.user_id)

    async def register(
        self,
        session: SessionContext,
        username: str,
        email: str,
        password: str,
    ) -> AuthResponse:
        """
        Create an account and log the caller in.

        Validation runs before any storage access. A taken username or
        email is reported on the ``username`` field.
        """
        errors = validate_register(username, email, password)
        if errors:
            return AuthResponse(errors=errors)

        password_hash = await run_in_threadpool(hash_password, password)

        try:
            user = await self.users.create(username=username, email=email, password_hash=password_hash)
        except ConflictError:
            logger.info("Registration rejected, username or email taken: %s", username)
            return AuthResponse.failure(
                "username",
                f"The username '{username}' has already been taken!",
            )

        session.bind_user(user.id)
        return self._success(user)

    async def login(
        self,
        session: SessionContext,
        username_or_email: str,
        password: str,
    ) -> AuthResponse:
        """
        Authenticate by username, or by email when the input contains '@'.
        """
        if "@" in username_or_email:
            user = await self.users.find_by_email(username_or_email)
        else:
            user = await self.users.find_by_username(username_or_email)

        if user is None:
            logger.warning("Login failed, unknown user '%s'", username_or_email)
            return AuthResponse.failure(
                "usernameOrEmail",
                f"Could not find user '{username_or_email}'!",
            )

        valid = await run_in_threadpool(verify_password, password, user.password_hash)
        if not valid:
            logger.warning("Login failed, wrong password for user id=%s", user.id)
            return AuthResponse.failure(
                "password",
                f"Password incorrect for user '{username_or_email}'!",
            )

        # Upgrade hashes made with an older work factor
        if needs_rehash(user.password_hash):
            new_hash = await run_in_threadpool(hash_password, password)
            user = await self.users.update_password(user.id, new_hash) or user

        session.bind_user(user.id)
        logger.info("User '%s' logged in", user.username)
        return self._success(user)

    async def logout(self, session: SessionContext) -> bool:
        """
        Destroy the caller's session.

        Returns False if the store could not delete it, whatever the
        storage error; the caller clears the cookie either way.
        """
        try:
            destroyed = await self.sessions.destroy(session.session_id)
        except (FatalError, SQLAlchemyError) as e:
            logger.error("Unable to destroy session %s: %s", session.session_id, e)
            return False

        session.user_id = None
        session.modified = False
        return destroyed

    async def forgot_password(self, email: str) -> bool:
        """
        Email a password reset link if the address belongs to a user.

        Always returns True so callers cannot probe which emails are
        registered. Email delivery failures are logged, not reported.
        """
        user = await self.users.find_by_email(email)
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return True

        token = generate_reset_token()
        await self.reset_tokens.set(
            self.settings.FORGOT_PASSWORD_PREFIX + token,
            user.id,
            timedelta(days=self.settings.RESET_TOKEN_EXPIRE_DAYS),
        )

        body = build_reset_link(self.settings.FRONTEND_URL, token)
        sent = await run_in_threadpool(self.notifier.send_reset_email, user.email, body)
        if not sent:
            logger.error("Reset email for user id=%s could not be delivered", user.id)

        return True

    async def change_password(
        self,
        session: SessionContext,
        token: str,
        new_password: str,
    ) -> AuthResponse:
        """
        Redeem a reset token, set the new password and log the user in.

        The token is deleted on success and when its user no longer exists.
        """
        errors = validate_new_password(new_password)
        if errors:
            return AuthResponse(errors=errors)

        key = self.settings.FORGOT_PASSWORD_PREFIX + token
        user_id = await self.reset_tokens.get(key)
        if user_id is None:
            logger.warning("Password change attempted with expired or unknown token")
            return AuthResponse.failure("token", "token expired")

        password_hash = await run_in_threadpool(hash_password, new_password)
        user = await self.users.update_password(user_id, password_hash)
        await self.reset_tokens.delete(key)

        if user is None:
            logger.warning("Password change for deleted user id=%s", user_id)
            return AuthResponse.failure("token", "user no longer exists")

        session.bind_user(user.id)
        logger.info("Password changed for user '%s'", user.username)
        return self._success(user)
