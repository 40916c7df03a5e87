"""
Postboard - Authentication Database Models

SQLModel-based models for users, sessions and password reset tokens.
Uses PostgreSQL for production, SQLite for local development.

Security:
- Passwords stored as bcrypt hashes only
- Sessions are server-side; the cookie only carries a signed session ID
- Reset tokens are random, single-use and time-limited
- All timestamps in UTC
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, DateTime


class User(SQLModel, table=True):
    """
    User account for authentication.

    Attributes:
        id: Unique identifier (autoincrement, immutable once assigned)
        username: Login identifier (unique, case-sensitive as stored)
        email: Login identifier and reset address (unique)
        password_hash: bcrypt hash (never store plaintext)
        created_at: Account creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """
    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Unique user identifier"
    )
    username: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="Username (login identifier)"
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="User email address"
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="bcrypt password hash"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, default=datetime.utcnow),
        description="Account creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow),
        description="Last update timestamp"
    )


class Session(SQLModel, table=True):
    """
    Server-side session keyed by the ID carried in the session cookie.

    Only sessions bound to a user are persisted; an unknown or expired
    session ID is treated as anonymous.

    Attributes:
        session_id: Unique session identifier (UUIDv4)
        user_id: User bound to this session (None means anonymous)
        issued_at: Session creation timestamp
        expires_at: Session expiration timestamp
    """
    __tablename__ = "sessions"

    session_id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique session identifier"
    )
    user_id: Optional[int] = Field(
        default=None,
        foreign_key="users.id",
        nullable=True,
        index=True,
        description="Reference to user"
    )
    issued_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False, default=datetime.utcnow),
        description="Session creation timestamp"
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Session expiration timestamp"
    )


class PasswordResetToken(SQLModel, table=True):
    """
    Single-use password reset grant.

    Entries behave like a key-value store with per-key expiry: the key is
    the prefixed random token, the value is the user ID.

    Attributes:
        key: Prefixed reset token
        user_id: User the token resets
        expires_at: Token expiration timestamp
    """
    __tablename__ = "password_reset_tokens"

    key: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Prefixed reset token"
    )
    user_id: int = Field(
        nullable=False,
        index=True,
        description="User the token belongs to"
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Token expiration timestamp"
    )
