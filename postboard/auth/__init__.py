"""
Postboard - Authentication Package

- bcrypt password hashing
- Server-side sessions referenced by a signed cookie
- Single-use, time-limited password reset tokens
- Field-level error results instead of exceptions for expected failures
"""

from postboard.auth.errors import FieldError, ConflictError, FatalError
from postboard.auth.models import User, Session, PasswordResetToken
from postboard.auth.password import hash_password, verify_password

__all__ = [
    "FieldError",
    "ConflictError",
    "FatalError",
    "User",
    "Session",
    "PasswordResetToken",
    "hash_password",
    "verify_password",
]
