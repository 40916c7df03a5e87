"""
Postboard - Session Cookie Signing

The session cookie carries only the session ID, wrapped in a JWT signed
with SECRET_KEY so clients cannot forge or swap session IDs. The session
itself (and the user it belongs to) lives server-side.

Security:
- Tampered or unsigned cookies are rejected and treated as anonymous
- The cookie expiry matches the server-side session lifetime
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

from postboard.auth.errors import InvalidCookieError
from postboard.config import settings


def sign_session_id(session_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """
    Produce the signed cookie value for a session.

    Args:
        session_id: Server-side session identifier
        expires_delta: Optional custom lifetime (defaults to the session lifetime)

    Returns:
        Encoded JWT string to store in the cookie
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(days=settings.SESSION_EXPIRE_DAYS))

    payload = {
        "sid": str(session_id),
        "iat": now,
        "exp": expire,
    }

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.COOKIE_ALGORITHM)


def verify_session_cookie(value: str) -> UUID:
    """
    Verify a cookie value and extract the session ID.

    Raises:
        InvalidCookieError: If the signature, expiry or payload is invalid
    """
    try:
        payload = jwt.decode(value, settings.SECRET_KEY, algorithms=[settings.COOKIE_ALGORITHM])
        return UUID(payload["sid"])
    except (JWTError, KeyError, ValueError, TypeError) as e:
        raise InvalidCookieError(f"Session cookie rejected: {e}")


def read_session_cookie(value: Optional[str]) -> Optional[UUID]:
    """Return the session ID from a cookie value, or None when absent or invalid."""
    if not value:
        return None
    try:
        return verify_session_cookie(value)
    except InvalidCookieError:
        return None


def cookie_max_age() -> int:
    """Cookie lifetime in seconds."""
    return settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60
