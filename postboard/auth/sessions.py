"""
Postboard - Session Management

Server-side sessions keyed by the ID carried in the signed session cookie.

Each request gets a SessionContext loaded from the cookie. Auth operations
bind a user to the context; the route then persists it with
SessionStore.save() and sets the cookie. Anonymous contexts are never
persisted, so no row or cookie exists until a user logs in.

Security:
- Session ID is UUIDv4 (cryptographically random)
- Binding a user always issues a new session ID
- Logout deletes the server-side row immediately
- The bound user ID is not re-checked against the users table per request
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Session as DBSession, select

from postboard.auth.models import Session
from postboard.config import settings
from postboard.database import storage_errors

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """
    Per-request view of the caller's session.

    Attributes:
        session_id: ID from the cookie, or None for a fresh visitor
        user_id: Bound user, or None when anonymous
        modified: Whether the user binding changed during this request
    """
    session_id: Optional[UUID] = None
    user_id: Optional[int] = None
    modified: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def bind_user(self, user_id: int) -> None:
        """Associate the session with a user (login, register, password reset)."""
        self.user_id = user_id
        self.modified = True


class SessionStore:
    """SQL-backed session store with a fixed lifetime."""

    def __init__(self, db: DBSession, expire_days: Optional[int] = None):
        self.db = db
        self.expire_days = expire_days if expire_days is not None else settings.SESSION_EXPIRE_DAYS

    async def load(self, session_id: Optional[UUID]) -> SessionContext:
        """
        Build the context for a session ID taken from the cookie.

        Unknown or expired sessions yield a bare anonymous context; their
        ID is never reused. Expired rows are deleted.
        """
        if session_id is None:
            return SessionContext()

        with storage_errors():
            session = self.db.get(Session, session_id)

            if session is None:
                return SessionContext()

            if datetime.utcnow() > session.expires_at:
                self.db.delete(session)
                self.db.commit()
                return SessionContext()

        return SessionContext(session_id=session.session_id, user_id=session.user_id)

    async def save(self, context: SessionContext) -> UUID:
        """
        Persist the user binding of a context.

        Assigns a new session ID when the context has none.

        Returns:
            The session ID to put in the cookie
        """
        if context.session_id is None:
            context.session_id = uuid4()

        now = datetime.utcnow()

        with storage_errors():
            session = self.db.get(Session, context.session_id)
            if session is None:
                session = Session(
                    session_id=context.session_id,
                    issued_at=now,
                    expires_at=now + timedelta(days=self.expire_days),
                )
            session.user_id = context.user_id

            self.db.add(session)
            self.db.commit()

        context.modified = False
        return context.session_id

    async def regenerate(self, context: SessionContext) -> UUID:
        """
        Move the context to a fresh session ID and persist it.

        Called whenever a user is bound, so an ID seen before login never
        authenticates afterwards. The previous row is deleted.
        """
        previous = context.session_id
        context.session_id = None

        if previous is not None:
            await self.destroy(previous)

        return await self.save(context)

    async def destroy(self, session_id: Optional[UUID]) -> bool:
        """
        Delete a session (logout).

        Returns:
            True if the session no longer exists server-side
        """
        if session_id is None:
            return True

        with storage_errors():
            statement = select(Session).where(Session.session_id == session_id)
            session = self.db.exec(statement).first()

            if session is not None:
                self.db.delete(session)
                self.db.commit()

        logger.debug("Session %s destroyed", session_id)
        return True
