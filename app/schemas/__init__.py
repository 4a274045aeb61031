"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingRequestCreate,
    BookingRequestCreated,
    BookingRequestDetail,
    BookingRequestList,
    StatusUpdate,
    StatusUpdateResponse,
)
from app.schemas.ops import (
    GuestMessageRequest,
    GuestMessageResponse,
    OpsLogin,
    OpsQueue,
    OpsStats,
    OpsUserCreate,
    OpsUserResponse,
)
from app.schemas.review import (
    ClinicReviewList,
    HelpfulResponse,
    ReviewCreate,
    ReviewCreated,
    ReviewEligibilityResponse,
    ReviewResponse,
)
from app.schemas.user import CurrentUserResponse, MessageResponse

__all__ = [
    # Booking
    "BookingRequestCreate",
    "BookingRequestCreated",
    "BookingRequestDetail",
    "BookingRequestList",
    "StatusUpdate",
    "StatusUpdateResponse",
    # Ops
    "OpsQueue",
    "OpsStats",
    "GuestMessageRequest",
    "GuestMessageResponse",
    "OpsLogin",
    "OpsUserCreate",
    "OpsUserResponse",
    # Review
    "ReviewCreate",
    "ReviewCreated",
    "ReviewEligibilityResponse",
    "ReviewResponse",
    "ClinicReviewList",
    "HelpfulResponse",
    # User
    "CurrentUserResponse",
    "MessageResponse",
]
