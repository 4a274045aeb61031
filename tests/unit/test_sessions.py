"""Tests for the session store and identity resolution."""

from datetime import UTC, datetime, timedelta

from app.domain.identity import ANONYMOUS, GuestIdentity, OpsIdentity, RegisteredUser
from app.domain.sla import as_utc
from app.models.session import AuthSession
from app.schemas.booking import BookingRequestCreate
from app.services import booking_service, session_service
from app.services.identity_service import resolve_guest, resolve_session, session_is_valid
from app.services.session_service import OPS_SESSION, USER_SESSION


class TestResolveSession:
    """Tests for identity_service.resolve_session."""

    async def test_user_session(self, db, user, session_token_factory):
        token = await session_token_factory(user)
        identity = await resolve_session(db, token, USER_SESSION)
        assert isinstance(identity, RegisteredUser)
        assert identity.id == user.id
        assert identity.kind == "user"

    async def test_ops_session(self, db, ops_user, session_token_factory):
        token = await session_token_factory(ops_user, OPS_SESSION)
        identity = await resolve_session(db, token, OPS_SESSION)
        assert isinstance(identity, OpsIdentity)
        assert identity.role == "operator"

    async def test_session_type_must_match(self, db, user, session_token_factory):
        token = await session_token_factory(user)
        assert await resolve_session(db, token, OPS_SESSION) is ANONYMOUS

    async def test_missing_or_unknown_token(self, db):
        assert await resolve_session(db, None, USER_SESSION) is ANONYMOUS
        assert await resolve_session(db, "nope", USER_SESSION) is ANONYMOUS

    async def test_expired_session_is_anonymous(self, db, user, session_token_factory):
        token = await session_token_factory(user, expire_days=7)
        later = datetime.now(UTC) + timedelta(days=8)
        assert await resolve_session(db, token, USER_SESSION, now=later) is ANONYMOUS

    async def test_revoked_session_is_anonymous(self, db, user, session_token_factory):
        token = await session_token_factory(user)
        assert await session_service.revoke_session(db, token) is True
        await db.commit()
        assert await resolve_session(db, token, USER_SESSION) is ANONYMOUS
        # Revoking twice is a no-op
        assert await session_service.revoke_session(db, token) is False

    async def test_inactive_ops_user_is_anonymous(self, db, ops_user_factory, session_token_factory):
        ops_user = await ops_user_factory(is_active=False)
        token = await session_token_factory(ops_user, OPS_SESSION)
        assert await resolve_session(db, token, OPS_SESSION) is ANONYMOUS


def test_session_validity_ignores_revocation_once_expired():
    now = datetime(2026, 1, 10, tzinfo=UTC)
    assert session_is_valid(now + timedelta(hours=1), None, now) is True
    assert session_is_valid(now - timedelta(seconds=1), None, now) is False
    assert session_is_valid(now - timedelta(seconds=1), now - timedelta(days=1), now) is False
    assert session_is_valid(now + timedelta(hours=1), now, now) is False


class TestResolveGuest:
    async def test_requires_matching_pair(self, db, clinic):
        booking = await booking_service.create_booking(
            db,
            ANONYMOUS,
            BookingRequestCreate(
                clinic_id=clinic.id,
                procedure="Filler",
                preferred_date=datetime.now(UTC).date() + timedelta(days=3),
                guest_email="guest@x.com",
            ),
        )
        await db.commit()

        identity = await resolve_guest(db, " GUEST@x.com ", booking.access_code.lower())
        assert identity == GuestIdentity(email="guest@x.com")
        assert await resolve_guest(db, "guest@x.com", "FFFFFFFF") is ANONYMOUS
        assert await resolve_guest(db, "other@x.com", booking.access_code) is ANONYMOUS
        assert await resolve_guest(db, None, booking.access_code) is ANONYMOUS


class TestPurge:
    async def test_purges_only_aged_out_sessions(self, db, user):
        now = datetime.now(UTC)
        fresh = await session_service.create_session(db, user.id, USER_SESSION, expire_days=7, now=now)
        revoked = await session_service.create_session(db, user.id, USER_SESSION, expire_days=7, now=now)
        stale = await session_service.create_session(
            db, user.id, USER_SESSION, expire_days=7, now=now - timedelta(days=30)
        )
        await session_service.revoke_session(db, revoked.token)
        await db.commit()

        purged = await session_service.purge_stale_sessions(db, retention_days=7, now=now)
        await db.commit()

        assert purged == 1
        assert await session_service.find_session(db, stale.token, USER_SESSION) is None
        remaining = await session_service.find_session(db, revoked.token, USER_SESSION)
        assert isinstance(remaining, AuthSession)
        assert as_utc(remaining.expires_at) > now
        assert await session_service.find_session(db, fresh.token, USER_SESSION) is not None
