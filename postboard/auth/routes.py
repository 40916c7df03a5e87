"""
Postboard - Authentication Routes

API endpoints for authentication:
- POST /auth/register         - Create account and log in
- POST /auth/login            - Authenticate by username or email
- POST /auth/logout           - Destroy session and clear cookie
- POST /auth/forgot-password  - Email a password reset link
- POST /auth/change-password  - Redeem reset token and log in
- GET  /auth/me               - Current user (null if anonymous)
- GET  /auth/users            - List users

Mutations that bind a user persist the session and set the cookie here;
the service only updates the SessionContext.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from postboard.auth.cookies import cookie_max_age, sign_session_id
from postboard.auth.dependencies import (
    get_auth_service,
    get_session_context,
    get_session_store,
)
from postboard.auth.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from postboard.auth.service import AuthService
from postboard.auth.sessions import SessionContext, SessionStore
from postboard.config import settings


router = APIRouter(prefix="/auth", tags=["authentication"])


async def _commit_session(
    response: Response,
    session: SessionContext,
    store: SessionStore,
) -> None:
    """Persist a changed session under a new ID and send its signed cookie."""
    if not session.modified:
        return

    session_id = await store.regenerate(session)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=sign_session_id(session_id),
        max_age=cookie_max_age(),
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )


@router.post("/register", response_model=AuthResponse, summary="Create account and log in")
async def register(
    body: RegisterRequest,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    result = await service.register(session, body.username, body.email, body.password)
    await _commit_session(response, session, store)
    return result


@router.post("/login", response_model=AuthResponse, summary="Authenticate user and bind session")
async def login(
    body: LoginRequest,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with username or email and password.

    Returns:
        AuthResponse with the user, or a field error on
        ``usernameOrEmail`` / ``password``
    """
    result = await service.login(session, body.username_or_email, body.password)
    await _commit_session(response, session, store)
    return result


@router.post("/logout", response_model=bool, summary="Destroy current session")
async def logout(
    response: Response,
    session: SessionContext = Depends(get_session_context),
    service: AuthService = Depends(get_auth_service),
):
    """
    Destroy the session server-side and clear the cookie.

    The cookie is cleared even when the store fails; the result reports
    whether the server-side session was destroyed.
    """
    try:
        return await service.logout(session)
    finally:
        response.delete_cookie(
            key=settings.COOKIE_NAME,
            httponly=True,
            samesite="lax",
            secure=settings.COOKIE_SECURE,
        )


@router.post("/forgot-password", response_model=bool, summary="Send password reset email")
async def forgot_password(
    body: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Always true, whether or not the email is registered."""
    return await service.forgot_password(body.email)


@router.post("/change-password", response_model=AuthResponse, summary="Reset password with token")
async def change_password(
    body: ChangePasswordRequest,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    store: SessionStore = Depends(get_session_store),
    service: AuthService = Depends(get_auth_service),
):
    result = await service.change_password(session, body.token, body.new_password)
    await _commit_session(response, session, store)
    return result


@router.get("/me", response_model=Optional[UserResponse], summary="Get current user")
async def me(
    session: SessionContext = Depends(get_session_context),
    service: AuthService = Depends(get_auth_service),
):
    return await service.me(session)


@router.get("/users", response_model=List[UserResponse], summary="List users")
async def list_users(service: AuthService = Depends(get_auth_service)):
    return await service.users.list_all()
