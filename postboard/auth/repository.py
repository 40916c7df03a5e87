"""
Postboard - User Repository

Persistent storage of user records. Uniqueness of username and email is
enforced by the database; a violation surfaces as ConflictError so callers
never need to pre-check and race against concurrent inserts.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session as DBSession, select

from postboard.auth.errors import ConflictError
from postboard.auth.models import User
from postboard.database import storage_errors

logger = logging.getLogger(__name__)


class UserRepository:
    """SQLModel-backed user storage."""

    def __init__(self, db: DBSession):
        self.db = db

    async def find_by_id(self, user_id: int) -> Optional[User]:
        with storage_errors():
            return self.db.get(User, user_id)

    async def find_by_username(self, username: str) -> Optional[User]:
        with storage_errors():
            statement = select(User).where(User.username == username)
            return self.db.exec(statement).first()

    async def find_by_email(self, email: str) -> Optional[User]:
        with storage_errors():
            statement = select(User).where(User.email == email)
            return self.db.exec(statement).first()

    async def list_all(self) -> List[User]:
        with storage_errors():
            statement = select(User).order_by(User.id)
            return list(self.db.exec(statement).all())

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: If the username or email is already taken
        """
        now = datetime.utcnow()
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

        with storage_errors():
            try:
                self.db.add(user)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"User '{username}' conflicts with an existing user") from e
            self.db.refresh(user)

        logger.info("Created user %s (id=%s)", user.username, user.id)
        return user

    async def update_password(self, user_id: int, password_hash: str) -> Optional[User]:
        """Replace a user's password hash. Returns None if the user is gone."""
        with storage_errors():
            user = self.db.get(User, user_id)
            if user is None:
                return None

            user.password_hash = password_hash
            user.updated_at = datetime.utcnow()
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)

        return user
