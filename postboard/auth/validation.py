"""Input rules for registration and password changes."""

from typing import List, Optional

from postboard.auth.errors import FieldError

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4


def validate_register(username: str, email: str, password: str) -> Optional[List[FieldError]]:
    """Return the first failing rule as a one-element error list, or None."""
    if "@" not in email:
        return [FieldError(field="email", message="Email is not valid")]

    if len(username) < MIN_USERNAME_LENGTH:
        return [FieldError(
            field="username",
            message=f"Username must have at least {MIN_USERNAME_LENGTH} characters",
        )]

    # '@' is how login tells usernames and emails apart
    if "@" in username:
        return [FieldError(field="username", message="Username cannot include '@'")]

    if len(password) < MIN_PASSWORD_LENGTH:
        return [FieldError(
            field="password",
            message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )]

    return None


def validate_new_password(new_password: str) -> Optional[List[FieldError]]:
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return [FieldError(
            field="newPassword",
            message=f"Length must be at least {MIN_PASSWORD_LENGTH} characters",
        )]
    return None
