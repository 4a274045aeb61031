"""Ops (staff) authentication endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.api.deps import AppSettings, CurrentOpsUser, DbSession
from app.core.exceptions import AuthenticationError, ConflictError
from app.core.permissions import require_ops_admin
from app.core.security import get_password_hash, verify_password
from app.domain.identity import OpsIdentity
from app.models.user import OpsUser
from app.schemas.ops import OpsLogin, OpsUserCreate, OpsUserResponse
from app.schemas.user import MessageResponse
from app.services import session_service
from app.utils.validators import normalize_email

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=OpsUserResponse)
async def login(
    credentials: OpsLogin,
    request: Request,
    response: Response,
    db: DbSession,
    settings: AppSettings,
) -> OpsUserResponse:
    """Login with email and password; sets the ops session cookie."""
    email = normalize_email(credentials.email)
    result = await db.execute(select(OpsUser).where(OpsUser.email == email))
    ops_user = result.scalar_one_or_none()

    # Unknown, inactive and wrong password all look the same
    if (
        not ops_user
        or not ops_user.is_active
        or not verify_password(credentials.password, ops_user.password_hash)
    ):
        raise AuthenticationError(INVALID_CREDENTIALS)

    now = datetime.now(UTC)
    session = await session_service.create_session(
        db,
        ops_user.id,
        session_service.OPS_SESSION,
        expire_days=settings.session_expire_days,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
        now=now,
    )
    ops_user.last_login_at = now
    await db.flush()

    response.set_cookie(
        key=settings.ops_session_cookie_name,
        value=session.token,
        max_age=settings.session_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    logger.info(f"Ops user {ops_user.id} logged in")
    return OpsUserResponse.model_validate(ops_user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    """Revoke the ops session and clear the cookie."""
    token = request.cookies.get(settings.ops_session_cookie_name)
    if token:
        await session_service.revoke_session(db, token)
    response.delete_cookie(settings.ops_session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=OpsUserResponse)
async def get_me(ops_user: CurrentOpsUser) -> OpsUserResponse:
    """Current ops user."""
    return OpsUserResponse(
        id=ops_user.id,
        email=ops_user.email,
        name=ops_user.name,
        role=ops_user.role,
    )


@router.post("/users", response_model=OpsUserResponse, status_code=status.HTTP_201_CREATED)
async def create_ops_user(
    data: OpsUserCreate,
    db: DbSession,
    admin: Annotated[OpsIdentity, Depends(require_ops_admin)],
) -> OpsUserResponse:
    """Create a staff account (admin only)."""
    email = normalize_email(data.email)
    result = await db.execute(select(OpsUser.id).where(OpsUser.email == email))
    if result.scalar_one_or_none():
        raise ConflictError("Ops user with this email already exists")

    ops_user = OpsUser(
        email=email,
        name=data.name,
        password_hash=get_password_hash(data.password),
        role=data.role,
        is_active=True,
        last_login_at=None,
    )
    db.add(ops_user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Ops user with this email already exists") from e

    logger.info(f"Ops user {ops_user.id} ({data.role}) created by {admin.id}")
    return OpsUserResponse.model_validate(ops_user)
