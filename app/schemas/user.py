"""Consumer account Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel


class CurrentUserResponse(BaseModel):
    """Logged-in consumer profile."""

    id: UUID
    email: str
    name: str
    locale: str
    profile_image: str | None = None


class MessageResponse(BaseModel):
    message: str
