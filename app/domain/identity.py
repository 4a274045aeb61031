"""Acting identities.

Every request resolves to exactly one of these variants. Consumers dispatch on
the variant type (or its ``kind`` discriminant), never on optional attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union
from uuid import UUID


@dataclass(frozen=True)
class RegisteredUser:
    """Consumer authenticated through a ``user`` session."""

    id: UUID
    email: str
    name: str
    locale: str = "en"
    profile_image: str | None = None
    kind: Literal["user"] = "user"


@dataclass(frozen=True)
class OpsIdentity:
    """Staff member authenticated through an ``ops`` session."""

    id: UUID
    email: str
    name: str
    role: str
    kind: Literal["ops"] = "ops"


@dataclass(frozen=True)
class GuestIdentity:
    """Guest proven by a matching (email, access code) pair."""

    email: str
    kind: Literal["guest"] = "guest"


@dataclass(frozen=True)
class Anonymous:
    """No usable credential."""

    kind: Literal["anonymous"] = "anonymous"


Identity = Union[RegisteredUser, OpsIdentity, GuestIdentity, Anonymous]

ANONYMOUS = Anonymous()
