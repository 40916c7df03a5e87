"""
Postboard - Authentication Errors

Expected failures (bad input, taken username, unknown user, wrong password,
expired token) are reported to callers as FieldError values inside an
AuthResponse. Exceptions are reserved for storage-level conditions:
ConflictError is raised by the user repository and converted by the
service; FatalError subclasses propagate to the HTTP layer.
"""

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """A (field, message) pair describing why an input was rejected."""
    field: str = Field(..., description="Name of the offending input")
    message: str = Field(..., description="Human-readable reason")


class AuthError(Exception):
    """Base exception for authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class ConflictError(AuthError):
    """Raised when an insert would violate a uniqueness constraint."""

    def __init__(self, message: str = "Username or email already exists"):
        super().__init__(message)


class InvalidCookieError(AuthError):
    """Raised when a session cookie is tampered, malformed or unsigned."""

    def __init__(self, message: str = "Invalid session cookie"):
        super().__init__(message)


class FatalError(AuthError):
    """Unexpected failure that must reach the transport layer."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message)


class StorageUnavailableError(FatalError):
    """Raised when the database cannot be reached."""

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message)
