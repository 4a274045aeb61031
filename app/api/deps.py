"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.context import AppContext
from app.core.exceptions import AuthenticationError
from app.database import get_db
from app.domain.identity import Identity, OpsIdentity, RegisteredUser
from app.services.identity_service import resolve_session
from app.services.notification_service import BookingNotifier
from app.services.session_service import OPS_SESSION, USER_SESSION


def get_context(request: Request) -> AppContext:
    """Application context built at startup."""
    return request.app.state.context


def get_app_settings(context: Annotated[AppContext, Depends(get_context)]) -> Settings:
    return context.settings


def get_notifier(context: Annotated[AppContext, Depends(get_context)]) -> BookingNotifier:
    return context.notifier


DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


async def get_identity(request: Request, db: DbSession, settings: AppSettings) -> Identity:
    """Consumer identity from the session cookie, or ANONYMOUS."""
    token = request.cookies.get(settings.session_cookie_name)
    return await resolve_session(db, token, USER_SESSION)


async def get_current_user(
    identity: Annotated[Identity, Depends(get_identity)],
) -> RegisteredUser:
    """Require a logged-in consumer."""
    if not isinstance(identity, RegisteredUser):
        raise AuthenticationError()
    return identity


async def get_ops_identity(request: Request, db: DbSession, settings: AppSettings) -> Identity:
    """Staff identity from the ops session cookie, or ANONYMOUS."""
    token = request.cookies.get(settings.ops_session_cookie_name)
    return await resolve_session(db, token, OPS_SESSION)


async def get_current_ops_user(
    identity: Annotated[Identity, Depends(get_ops_identity)],
) -> OpsIdentity:
    """Require an active ops session."""
    if not isinstance(identity, OpsIdentity):
        raise AuthenticationError("Ops authentication required")
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_identity)]
CurrentUser = Annotated[RegisteredUser, Depends(get_current_user)]
CurrentOpsUser = Annotated[OpsIdentity, Depends(get_current_ops_user)]
Notifier = Annotated[BookingNotifier, Depends(get_notifier)]
