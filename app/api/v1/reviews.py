"""Review endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import CurrentIdentity, CurrentUser, DbSession
from app.schemas.review import (
    ClinicReviewList,
    HelpfulResponse,
    MyReviewResponse,
    ReviewCreate,
    ReviewCreated,
    ReviewEligibilityResponse,
    ReviewResponse,
    ReviewSort,
    ReviewStats,
)
from app.services import review_service

router = APIRouter()


@router.post("/", response_model=ReviewCreated, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewCreated:
    """Review a confirmed booking you own."""
    review = await review_service.create_review(db, identity, review_data)
    return ReviewCreated(id=review.id, message="Review submitted successfully")


@router.get("/can-review/{booking_id}", response_model=ReviewEligibilityResponse)
async def can_review(
    booking_id: UUID,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewEligibilityResponse:
    """Whether the caller may review this booking, and why not."""
    eligibility = await review_service.check_review_eligibility(db, identity, booking_id)
    return ReviewEligibilityResponse(can_review=eligibility.allowed, reason=eligibility.reason)


@router.get("/clinic/{clinic_id}", response_model=ClinicReviewList)
async def get_clinic_reviews(
    clinic_id: UUID,
    db: DbSession,
    sort: ReviewSort = "recent",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> ClinicReviewList:
    """Visible reviews for a clinic with rating statistics."""
    result = await review_service.list_clinic_reviews(
        db, clinic_id, sort=sort, page=page, limit=limit
    )
    return ClinicReviewList(
        items=[
            ReviewResponse.model_validate(item["review"]).model_copy(
                update={
                    "user_name": item["user_name"],
                    "user_profile_image": item["user_profile_image"],
                }
            )
            for item in result["items"]
        ],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
        total_pages=result["total_pages"],
        stats=ReviewStats(**result["stats"]),
    )


@router.get("/my-reviews", response_model=list[MyReviewResponse])
async def get_my_reviews(db: DbSession, user: CurrentUser) -> list[MyReviewResponse]:
    """Reviews written by the logged-in user."""
    reviews = await review_service.list_user_reviews(db, user.id)
    return [
        MyReviewResponse.model_validate(review).model_copy(
            update={"clinic_name": clinic_name, "user_name": user.name}
        )
        for review, clinic_name in reviews
    ]


@router.post("/{review_id}/helpful", response_model=HelpfulResponse)
async def mark_review_helpful(review_id: UUID, db: DbSession) -> HelpfulResponse:
    """Mark a review as helpful."""
    helpful_count = await review_service.mark_helpful(db, review_id)
    return HelpfulResponse(helpful_count=helpful_count)
