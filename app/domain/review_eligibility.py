"""Review eligibility gate.

A review needs a logged-in owner of a confirmed booking that has no review yet.
An access code alone is not enough. Checks run in a fixed order and the first
failure is reported.
"""

from dataclasses import dataclass
from typing import Protocol

from app.domain.booking_access import BookingOwnership, owns_booking
from app.domain.booking_state import CONFIRMED
from app.domain.identity import Identity, RegisteredUser

LOGIN_REQUIRED = "login required"
NOT_OWNER = "not your booking"
NOT_CONFIRMED = "booking must be confirmed"
ALREADY_REVIEWED = "already reviewed"
BOOKING_NOT_FOUND = "booking not found"


class ReviewableBooking(BookingOwnership, Protocol):
    status: str


@dataclass(frozen=True)
class ReviewEligibility:
    allowed: bool
    reason: str | None = None


def evaluate_review_eligibility(
    identity: Identity,
    booking: ReviewableBooking,
    already_reviewed: bool,
) -> ReviewEligibility:
    if not isinstance(identity, RegisteredUser):
        return ReviewEligibility(False, LOGIN_REQUIRED)
    if not owns_booking(identity, booking):
        return ReviewEligibility(False, NOT_OWNER)
    if booking.status != CONFIRMED:
        return ReviewEligibility(False, NOT_CONFIRMED)
    if already_reviewed:
        return ReviewEligibility(False, ALREADY_REVIEWED)
    return ReviewEligibility(True)
