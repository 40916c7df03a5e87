"""
Postboard - Request Dependencies

FastAPI dependencies that wire the auth service for a request:
database session, session context from the cookie, and the service itself.

Usage:
    @router.get("/protected")
    async def protected_route(session: SessionContext = Depends(require_user)):
        ...
"""

from typing import Generator

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session as DBSession

from postboard.auth.cookies import read_session_cookie
from postboard.auth.notifier import EmailNotifier
from postboard.auth.repository import UserRepository
from postboard.auth.reset_tokens import ResetTokenStore
from postboard.auth.service import AuthService
from postboard.auth.sessions import SessionContext, SessionStore
from postboard.config import settings


def get_db(request: Request) -> Generator[DBSession, None, None]:
    """Yield a database session from app state (closed after the request)."""
    db = request.app.state.db_session_factory()
    try:
        yield db
    finally:
        db.close()


def get_notifier() -> EmailNotifier:
    """Email notifier; overridden in tests."""
    return EmailNotifier(settings)


def get_session_store(db: DBSession = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


async def get_session_context(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionContext:
    """
    Load the caller's session from the signed cookie.

    Missing, tampered or expired cookies yield an anonymous context.
    """
    session_id = read_session_cookie(request.cookies.get(settings.COOKIE_NAME))
    return await store.load(session_id)


def get_auth_service(
    db: DBSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    notifier: EmailNotifier = Depends(get_notifier),
) -> AuthService:
    return AuthService(
        users=UserRepository(db),
        sessions=store,
        reset_tokens=ResetTokenStore(db),
        notifier=notifier,
        settings=settings,
    )


async def require_user(
    session: SessionContext = Depends(get_session_context),
) -> SessionContext:
    """
    Reject anonymous callers.

    Raises:
        HTTPException 401: No user bound to the session
    """
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session
