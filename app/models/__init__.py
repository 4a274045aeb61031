"""Database models."""

from app.models.booking import BookingRequest, BookingStatusHistory
from app.models.clinic import Clinic
from app.models.review import Review
from app.models.session import AuthSession
from app.models.user import OpsUser, User

__all__ = [
    # Clinic
    "Clinic",
    # User
    "User",
    "OpsUser",
    "AuthSession",
    # Booking
    "BookingRequest",
    "BookingStatusHistory",
    # Review
    "Review",
]
