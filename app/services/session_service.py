"""Login session storage."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import generate_session_token, session_expiration
from app.models.session import AuthSession

logger = logging.getLogger(__name__)

USER_SESSION = "user"
OPS_SESSION = "ops"


async def create_session(
    db: AsyncSession,
    user_id: UUID,
    user_type: str,
    expire_days: int,
    user_agent: str | None = None,
    ip_address: str | None = None,
    now: datetime | None = None,
) -> AuthSession:
    """Create a new bearer session for a user or ops account.

    Args:
        db: Database session
        user_id: Account id (users or ops_users)
        user_type: USER_SESSION or OPS_SESSION
        expire_days: Session lifetime
        user_agent: Client user agent
        ip_address: Client address
        now: Creation time (defaults to current UTC time)

    Returns:
        AuthSession: The persisted session; ``token`` goes into the cookie
    """
    now = now or datetime.now(UTC)
    session = AuthSession(
        user_id=user_id,
        user_type=user_type,
        token=generate_session_token(),
        expires_at=session_expiration(expire_days, now),
        user_agent=user_agent,
        ip_address=ip_address,
        created_at=now,
    )
    db.add(session)
    await db.flush()
    return session


async def find_session(db: AsyncSession, token: str, user_type: str) -> AuthSession | None:
    result = await db.execute(
        select(AuthSession)
        .where(AuthSession.token == token, AuthSession.user_type == user_type)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def revoke_session(db: AsyncSession, token: str, now: datetime | None = None) -> bool:
    """Soft-revoke a session. Already revoked or unknown tokens are a no-op."""
    result = await db.execute(
        update(AuthSession)
        .where(AuthSession.token == token, AuthSession.revoked_at.is_(None))
        .values(revoked_at=now or datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def purge_stale_sessions(
    db: AsyncSession, retention_days: int, now: datetime | None = None
) -> int:
    """Delete sessions that expired more than ``retention_days`` ago.

    Revocation does not matter here; revoked sessions are kept until they age out.
    """
    cutoff = (now or datetime.now(UTC)) - timedelta(days=retention_days)
    result = await db.execute(
        delete(AuthSession)
        .where(AuthSession.expires_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    purged = result.rowcount or 0
    logger.info(f"Purged {purged} stale sessions (expired before {cutoff.isoformat()})")
    return purged
