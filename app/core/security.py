"""Password hashing and session token helpers."""

import secrets
from datetime import UTC, datetime, timedelta

from passlib.context import CryptContext

# Password hashing context using Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

SESSION_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using Argon2."""
    return pwd_context.hash(password)


def generate_session_token() -> str:
    """Generate an opaque, high-entropy session token (64 hex chars)."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def session_expiration(days: int, now: datetime | None = None) -> datetime:
    """Expiry timestamp for a session created at ``now``."""
    return (now or datetime.now(UTC)) + timedelta(days=days)
