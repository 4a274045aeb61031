"""Booking access code generation."""

import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError

ACCESS_CODE_LENGTH = 8


def random_access_code() -> str:
    """Draw a fresh code: 8 uppercase hex characters like 'AB12CD34'."""
    return secrets.token_hex(ACCESS_CODE_LENGTH // 2).upper()


async def generate_access_code(db: AsyncSession, max_attempts: int = 5) -> str:
    """Generate an access code not used by any booking.

    Args:
        db: Database session for uniqueness check
        max_attempts: Number of draws before giving up

    Returns:
        str: Unused access code

    Raises:
        ConflictError: Every draw collided with an existing code
    """
    from app.models.booking import BookingRequest

    for _ in range(max_attempts):
        code = random_access_code()
        result = await db.execute(
            select(BookingRequest.id).where(BookingRequest.access_code == code)
        )
        if result.scalar_one_or_none() is None:
            return code

    raise ConflictError("Could not allocate a unique access code, please retry")
