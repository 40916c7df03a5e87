"""
Postboard - Database Seed Script

Creates demo users for local development.

Usage:
    python -m scripts.seed_users
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from datetime import datetime

from sqlmodel import Session, select

from postboard.auth.models import User
from postboard.auth.password import hash_password
from postboard.config import settings
from postboard.database import get_engine, init_db


DEMO_USERS = [
    ("alice", "alice@postboard.local", "secret1"),
    ("bob", "bob@postboard.local", "secret2"),
]


def seed_demo_users():
    """Create demo users, skipping any that already exist."""
    engine = get_engine(settings.DATABASE_URL)
    init_db(engine)

    with Session(engine) as session:
        for username, email, password in DEMO_USERS:
            existing = session.exec(
                select(User).where(User.username == username)
            ).first()

            if existing:
                print(f"User {username} already exists.")
                continue

            now = datetime.utcnow()
            session.add(User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                created_at=now,
                updated_at=now,
            ))
            print(f"Created user {username} ({email})")

        session.commit()


if __name__ == "__main__":
    seed_demo_users()
