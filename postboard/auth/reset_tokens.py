"""
Postboard - Password Reset Token Store

Key-value store with per-key expiry for single-use reset tokens.
Keys are the configured prefix plus the raw token; values are user IDs.
Expired entries read as absent and are removed when encountered.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session as DBSession

from postboard.auth.models import PasswordResetToken
from postboard.database import storage_errors


def generate_reset_token() -> str:
    """Return a fresh URL-safe token from a cryptographically strong source."""
    return secrets.token_urlsafe(32)


class ResetTokenStore:
    """SQL-backed TTL store for password reset tokens."""

    def __init__(self, db: DBSession):
        self.db = db

    async def set(self, key: str, user_id: int, ttl: timedelta) -> None:
        with storage_errors():
            entry = self.db.get(PasswordResetToken, key)
            if entry is None:
                entry = PasswordResetToken(key=key, user_id=user_id, expires_at=datetime.utcnow() + ttl)
            else:
                entry.user_id = user_id
                entry.expires_at = datetime.utcnow() + ttl
            self.db.add(entry)
            self.db.commit()

    async def get(self, key: str) -> Optional[int]:
        with storage_errors():
            entry = self.db.get(PasswordResetToken, key)
            if entry is None:
                return None

            if datetime.utcnow() >= entry.expires_at:
                self.db.delete(entry)
                self.db.commit()
                return None

            return entry.user_id

    async def delete(self, key: str) -> None:
        with storage_errors():
            entry = self.db.get(PasswordResetToken, key)
            if entry is not None:
                self.db.delete(entry)
                self.db.commit()
