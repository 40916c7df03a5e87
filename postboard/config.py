"""
Postboard - Configuration Management

Centralized configuration using Pydantic Settings.
All secrets and connection strings are loaded from environment variables.

Security: No production secrets are hardcoded. Use .env for local development.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL: SQLAlchemy URL for users, sessions, reset tokens and posts
        SECRET_KEY: Signing key for the session cookie
        COOKIE_NAME: Name of the session cookie
        SESSION_EXPIRE_DAYS: Session lifetime (effectively "until logout")
        RESET_TOKEN_EXPIRE_DAYS: Lifetime of a password reset token
        FRONTEND_URL: Base URL used to build password reset links
        ALLOWED_ORIGINS: CORS allowed origins for the frontend
    """

    # Database (PostgreSQL for production, SQLite for development)
    DATABASE_URL: str = "sqlite:///./postboard.db"

    # Security
    SECRET_KEY: str = "dev-only-secret-change-me"  # Override via environment
    COOKIE_ALGORITHM: str = "HS256"
    COOKIE_NAME: str = "qid"
    COOKIE_SECURE: bool = False  # Enable in production (HTTPS only)
    SESSION_EXPIRE_DAYS: int = 365 * 10
    BCRYPT_WORK_FACTOR: int = 12

    # Password reset
    FORGOT_PASSWORD_PREFIX: str = "forget-password:"
    RESET_TOKEN_EXPIRE_DAYS: int = 3
    FRONTEND_URL: str = "http://localhost:3000"

    # Email
    SMTP_ENABLED: bool = False
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_STARTTLS: bool = True
    SMTP_FROM_EMAIL: str = "no-reply@postboard.local"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
