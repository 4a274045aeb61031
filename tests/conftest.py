"""Shared fixtures: a SQLite-backed application context and HTTP clients."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.context import AppContext
from app.core.exceptions import DependencyError
from app.core.security import get_password_hash
from app.database import init_db
from app.main import create_application
from app.models.clinic import Clinic
from app.models.user import OpsUser, User
from app.services import session_service
from app.services.email_service import BookingEmailData
from helpers import OPS_PASSWORD


class FakeEmailService:
    """Records booking emails instead of calling SendGrid."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str | None, BookingEmailData]] = []
        self.fail = False

    async def send_booking_email(
        self, email_type: str, locale: str | None, data: BookingEmailData
    ) -> bool:
        if self.fail:
            raise DependencyError("sendgrid", "HTTP 500")
        self.sent.append((email_type, locale, data))
        return True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url_override=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        debug=True,
        sendgrid_api_key=None,
        log_level="INFO",
    )


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
async def context(settings, email_service) -> AsyncGenerator[AppContext, None]:
    context = AppContext.create(settings, email_service=email_service)
    await init_db(context.engine)
    yield context
    await context.close()


@pytest.fixture
async def db(context) -> AsyncGenerator[AsyncSession, None]:
    async with context.session_factory() as session:
        yield session


@pytest.fixture
def app(settings, context):
    application = create_application(settings)
    # ASGITransport does not run the lifespan
    application.state.context = context
    return application


@pytest.fixture
def make_client(app):
    """Build clients carrying the given cookies."""

    def factory(**cookies: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
            cookies=cookies,
        )

    return factory


@pytest.fixture
async def client(make_client) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with make_client() as anonymous:
        yield anonymous


# ==================== FACTORIES ====================


@pytest.fixture
def clinic_factory(db):
    async def create(**overrides) -> Clinic:
        clinic = Clinic(
            name=overrides.pop("name", {"en": "Gangnam Glow Clinic", "ja": "江南グロウクリニック"}),
            address=overrides.pop("address", {"en": "123 Teheran-ro, Seoul"}),
            city=overrides.pop("city", "seoul"),
            phone=overrides.pop("phone", "+82-2-555-0101"),
            **overrides,
        )
        db.add(clinic)
        await db.commit()
        return clinic

    return create


@pytest.fixture
def user_factory(db):
    async def create(email: str = "user@example.com", name: str = "Test User") -> User:
        user = User(
            email=email,
            name=name,
            provider="google",
            provider_id=f"google-{email}",
        )
        db.add(user)
        await db.commit()
        return user

    return create


@pytest.fixture
def ops_user_factory(db):
    async def create(email: str = "ops@globalbeauty.com", role: str = "operator", is_active: bool = True) -> OpsUser:
        ops_user = OpsUser(
            email=email,
            name="Ops Staff",
            password_hash=get_password_hash(OPS_PASSWORD),
            role=role,
            is_active=is_active,
        )
        db.add(ops_user)
        await db.commit()
        return ops_user

    return create


@pytest.fixture
def session_token_factory(db, settings):
    """Issue a session token for a user or ops account."""

    async def create(account, user_type: str = session_service.USER_SESSION, **kwargs) -> str:
        session = await session_service.create_session(
            db,
            account.id,
            user_type,
            expire_days=kwargs.pop("expire_days", settings.session_expire_days),
            **kwargs,
        )
        await db.commit()
        return session.token

    return create


@pytest.fixture
async def clinic(clinic_factory) -> Clinic:
    return await clinic_factory()


@pytest.fixture
async def user(user_factory) -> User:
    return await user_factory()


@pytest.fixture
async def ops_user(ops_user_factory) -> OpsUser:
    return await ops_user_factory()


@pytest.fixture
async def user_client(make_client, session_token_factory, user, settings):
    token = await session_token_factory(user)
    async with make_client(**{settings.session_cookie_name: token}) as user_client:
        yield user_client


@pytest.fixture
async def ops_client(make_client, session_token_factory, ops_user, settings):
    token = await session_token_factory(ops_user, session_service.OPS_SESSION)
    async with make_client(**{settings.ops_session_cookie_name: token}) as ops_client:
        yield ops_client

