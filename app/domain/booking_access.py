"""Booking read authorization.

Two independent grants: ownership by the acting identity, or presenting the
booking's access code. Ops writes do not go through here; they are gated by
ops permissions instead.
"""

import secrets
from typing import Protocol
from uuid import UUID

from app.core.exceptions import AuthorizationError
from app.domain.identity import GuestIdentity, Identity, RegisteredUser
from app.utils.validators import normalize_access_code, normalize_email


class BookingOwnership(Protocol):
    user_id: UUID | None
    guest_email: str | None
    access_code: str


def _same_email(stored: str | None, candidate: str | None) -> bool:
    stored_email = normalize_email(stored)
    return stored_email is not None and stored_email == normalize_email(candidate)


def owns_booking(identity: Identity, booking: BookingOwnership) -> bool:
    """Ownership: same user id, or same (normalized) email."""
    if isinstance(identity, RegisteredUser):
        if booking.user_id is not None and booking.user_id == identity.id:
            return True
        return _same_email(booking.guest_email, identity.email)
    if isinstance(identity, GuestIdentity):
        return _same_email(booking.guest_email, identity.email)
    # Ops and anonymous identities never own bookings
    return False


def has_valid_access_code(booking: BookingOwnership, presented: str | None) -> bool:
    """Capability check, independent of who is asking."""
    code = normalize_access_code(presented)
    if not code:
        return False
    return secrets.compare_digest(code.encode(), normalize_access_code(booking.access_code).encode())


def can_access_booking(
    identity: Identity,
    booking: BookingOwnership,
    presented_access_code: str | None = None,
) -> bool:
    return owns_booking(identity, booking) or has_valid_access_code(booking, presented_access_code)


def authorize_booking_access(
    identity: Identity,
    booking: BookingOwnership,
    presented_access_code: str | None = None,
) -> None:
    """Raise AuthorizationError unless the caller may read the booking."""
    if not can_access_booking(identity, booking, presented_access_code):
        raise AuthorizationError("Access denied. Please provide a valid access code or login.")
