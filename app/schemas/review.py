"""Review-related Pydantic schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ReviewSort = Literal["recent", "rating-high", "rating-low", "helpful"]


class ReviewCreate(BaseModel):
    """Schema for creating a review."""

    booking_id: UUID
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=10, max_length=2000)
    photos: list[str] = Field(default_factory=list, max_length=5)


class ReviewCreated(BaseModel):
    id: UUID
    message: str


class ReviewEligibilityResponse(BaseModel):
    can_review: bool
    reason: str | None = None


class ReviewResponse(BaseModel):
    """Schema for review response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    clinic_id: UUID
    rating: int
    title: str
    content: str
    procedure: str
    visit_date: date
    locale: str
    photos: list[str]
    is_verified: bool
    helpful_count: int
    created_at: datetime

    # Author info (for display)
    user_name: str | None = None
    user_profile_image: str | None = None


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int]  # {1: count, 2: count, ...}


class ClinicReviewList(BaseModel):
    """Paginated clinic reviews with aggregate stats."""

    items: list[ReviewResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    stats: ReviewStats


class MyReviewResponse(ReviewResponse):
    clinic_name: dict[str, str] | None = None


class HelpfulResponse(BaseModel):
    helpful_count: int
