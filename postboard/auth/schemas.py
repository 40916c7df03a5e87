"""
Postboard - Authentication Request/Response Schemas

Pydantic models for API request validation and response serialization.
Separates API contracts from database models; the password hash never
appears in a response.

Length and shape rules are not enforced here: they are reported as field
errors by the auth service so clients get the {errors, user} shape.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from postboard.auth.errors import FieldError


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""
    username: str = Field(..., description="Desired username")
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Plaintext password")


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    username_or_email: str = Field(..., alias="usernameOrEmail", description="Username, or email if it contains '@'")
    password: str = Field(..., description="Plaintext password")

    class Config:
        populate_by_name = True


class ForgotPasswordRequest(BaseModel):
    """Request body for POST /auth/forgot-password."""
    email: str


class ChangePasswordRequest(BaseModel):
    """Request body for POST /auth/change-password."""
    token: str = Field(..., description="Token from the reset link")
    new_password: str = Field(..., alias="newPassword", description="New plaintext password")

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    """Public projection of a user."""
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Either the affected user or the field errors explaining the rejection."""
    errors: Optional[List[FieldError]] = None
    user: Optional[UserResponse] = None

    @classmethod
    def failure(cls, field: str, message: str) -> "AuthResponse":
        return cls(errors=[FieldError(field=field, message=message)])
