"""
Postboard - Password Hashing Utilities

Password hashing using bcrypt.
Work factor comes from settings and defaults to 12.

Security:
- Never log or expose plaintext passwords
- bcrypt includes salt automatically
- Hashing is deliberately slow; async callers run it in the threadpool
"""

from typing import Optional

import bcrypt

from postboard.config import settings


def hash_password(password: str, work_factor: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plaintext password
        work_factor: Override the configured bcrypt rounds

    Returns:
        bcrypt hash string (includes salt)

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$2b$")
        True
    """
    rounds = work_factor or settings.BCRYPT_WORK_FACTOR
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        plain_password: Plaintext password to verify
        hashed_password: bcrypt hash to check against

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except (ValueError, TypeError):
        # Invalid hash format
        return False


def needs_rehash(hashed_password: str, target_work_factor: Optional[int] = None) -> bool:
    """
    Check if a password hash was produced with a weaker work factor.

    Args:
        hashed_password: Existing bcrypt hash
        target_work_factor: Desired work factor (defaults to settings)

    Returns:
        True if hash should be regenerated
    """
    target = target_work_factor or settings.BCRYPT_WORK_FACTOR
    try:
        # bcrypt hash format: $2b$XX$...
        _, work_factor_str, _ = hashed_password.split("$")[1:4]
        return int(work_factor_str) < target
    except (ValueError, IndexError):
        return True
