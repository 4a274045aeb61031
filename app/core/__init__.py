"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from app.core.security import (
    generate_session_token,
    get_password_hash,
    session_expiration,
    verify_password,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DependencyError",
    "NotFoundError",
    "ValidationError",
    "generate_session_token",
    "get_password_hash",
    "session_expiration",
    "verify_password",
]
