"""Consumer authentication endpoints.

Sessions are issued by the OAuth login flow; this router only reads and
revokes them.
"""

from fastapi import APIRouter, Request, Response

from app.api.deps import AppSettings, CurrentUser, DbSession
from app.schemas.user import CurrentUserResponse, MessageResponse
from app.services import session_service

router = APIRouter()


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    """Revoke the current session and clear the cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await session_service.revoke_session(db, token)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(user: CurrentUser) -> CurrentUserResponse:
    """Current logged-in user."""
    return CurrentUserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        locale=user.locale,
        profile_image=user.profile_image,
    )
