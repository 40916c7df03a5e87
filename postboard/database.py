"""
Postboard - Database Configuration

SQLModel database setup with connection pooling.
Supports PostgreSQL (production) and SQLite (development).

Usage:
    from postboard.database import get_engine, init_db

    engine = get_engine()
    init_db(engine)  # Creates tables
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from postboard.auth.errors import StorageUnavailableError
from postboard.config import settings


def get_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine with appropriate configuration.

    Args:
        database_url: Override database URL
        echo: Log SQL statements

    Returns:
        SQLAlchemy Engine
    """
    url = database_url or settings.DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # PostgreSQL configuration with connection pooling
        engine = create_engine(
            url,
            echo=echo,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )

    return engine


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.

    Safe to call multiple times (uses CREATE IF NOT EXISTS).
    """
    # Import models to register them with SQLModel
    from postboard.auth.models import User, Session as UserSession, PasswordResetToken  # noqa: F401
    from postboard.posts.models import Post  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session_factory(engine: Engine):
    """
    Create a session factory bound to engine.

    Returns:
        Callable that creates new database sessions
    """
    def session_factory() -> Session:
        return Session(engine)

    return session_factory


@contextmanager
def storage_errors() -> Iterator[None]:
    """
    Translate connection-level database failures into StorageUnavailableError.

    Constraint violations and other SQLAlchemy errors pass through untouched.
    """
    try:
        yield
    except OperationalError as e:
        raise StorageUnavailableError(f"Database unavailable: {e.orig}") from e
