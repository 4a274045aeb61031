"""Resolve the acting identity from presented credentials.

Every failure resolves to ANONYMOUS; callers never learn which check failed.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.identity import (
    ANONYMOUS,
    Anonymous,
    GuestIdentity,
    Identity,
    OpsIdentity,
    RegisteredUser,
)
from app.domain.sla import as_utc
from app.models.booking import BookingRequest
from app.models.user import OpsUser, User
from app.services.session_service import OPS_SESSION, USER_SESSION, find_session
from app.utils.validators import normalize_access_code, normalize_email


def session_is_valid(expires_at: datetime, revoked_at: datetime | None, now: datetime) -> bool:
    return revoked_at is None and as_utc(expires_at) > as_utc(now)


async def resolve_session(
    db: AsyncSession,
    token: str | None,
    user_type: str,
    now: datetime | None = None,
) -> Identity:
    """Resolve a session token to a RegisteredUser or OpsIdentity.

    Args:
        db: Database session
        token: Cookie value
        user_type: USER_SESSION or OPS_SESSION
        now: Reference time for expiry

    Returns:
        Identity: The account behind the session, or ANONYMOUS
    """
    if not token:
        return ANONYMOUS

    session = await find_session(db, token, user_type)
    if session is None or not session_is_valid(
        session.expires_at, session.revoked_at, now or datetime.now(UTC)
    ):
        return ANONYMOUS

    if user_type == USER_SESSION:
        user = await db.get(User, session.user_id)
        if user is None:
            return ANONYMOUS
        return RegisteredUser(
            id=user.id,
            email=user.email,
            name=user.name,
            locale=user.locale,
            profile_image=user.profile_image,
        )

    if user_type == OPS_SESSION:
        ops_user = await db.get(OpsUser, session.user_id)
        if ops_user is None or not ops_user.is_active:
            return ANONYMOUS
        return OpsIdentity(
            id=ops_user.id,
            email=ops_user.email,
            name=ops_user.name,
            role=ops_user.role,
        )

    return ANONYMOUS


async def resolve_guest(
    db: AsyncSession, email: str | None, access_code: str | None
) -> GuestIdentity | Anonymous:
    """Resolve an (email, access code) pair to a guest.

    Both are required and must belong to the same booking.
    """
    normalized_email = normalize_email(email)
    code = normalize_access_code(access_code)
    if not normalized_email or not code:
        return ANONYMOUS

    result = await db.execute(
        select(BookingRequest.id)
        .where(
            BookingRequest.guest_email == normalized_email,
            BookingRequest.access_code == code,
        )
        .limit(1)
    )
    if result.scalar_one_or_none() is None:
        return ANONYMOUS
    return GuestIdentity(email=normalized_email)
