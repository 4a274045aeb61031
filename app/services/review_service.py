"""Review creation, eligibility and clinic rating aggregate."""

import logging
import math
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.domain.identity import Identity, RegisteredUser
from app.domain.review_eligibility import (
    ALREADY_REVIEWED,
    BOOKING_NOT_FOUND,
    LOGIN_REQUIRED,
    NOT_CONFIRMED,
    NOT_OWNER,
    ReviewEligibility,
    evaluate_review_eligibility,
)
from app.models.booking import BookingRequest
from app.models.clinic import Clinic
from app.models.review import Review
from app.models.user import User
from app.schemas.review import ReviewCreate
from app.services.booking_service import find_booking, get_booking, get_clinic

logger = logging.getLogger(__name__)

REVIEW_SORTS = {
    "recent": (Review.created_at.desc(),),
    "rating-high": (Review.rating.desc(), Review.created_at.desc()),
    "rating-low": (Review.rating.asc(), Review.created_at.desc()),
    "helpful": (Review.helpful_count.desc(), Review.created_at.desc()),
}


def round_rating(value: float | Decimal | None) -> float:
    """Round half-up to one decimal (4.25 -> 4.3)."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def visit_date_for(booking: BookingRequest) -> date:
    """The confirmed appointment date, else the guest's preferred date."""
    option = booking.confirmed_option or {}
    if option.get("date"):
        return date.fromisoformat(option["date"])
    return booking.preferred_date


async def has_review(db: AsyncSession, booking_id: UUID) -> bool:
    result = await db.execute(select(Review.id).where(Review.booking_id == booking_id))
    return result.scalar_one_or_none() is not None


async def check_review_eligibility(
    db: AsyncSession, identity: Identity, booking_id: UUID
) -> ReviewEligibility:
    # Login is checked before the lookup so existence is not revealed
    if not isinstance(identity, RegisteredUser):
        return ReviewEligibility(False, LOGIN_REQUIRED)
    booking = await find_booking(db, booking_id)
    if booking is None:
        return ReviewEligibility(False, BOOKING_NOT_FOUND)
    return evaluate_review_eligibility(identity, booking, await has_review(db, booking_id))


async def recompute_clinic_rating(db: AsyncSession, clinic_id: UUID) -> tuple[float, int]:
    """Recompute a clinic's rating and review count from all visible reviews.

    The clinic row is locked before aggregating, so a concurrent writer
    aggregates only after this transaction commits.
    """
    await db.execute(select(Clinic.id).where(Clinic.id == clinic_id).with_for_update())
    result = await db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.clinic_id == clinic_id,
            Review.is_visible.is_(True),
        )
    )
    average, count = result.one()
    rating = round_rating(average) if count else 0.0

    await db.execute(
        update(Clinic)
        .where(Clinic.id == clinic_id)
        .values(rating=rating, review_count=count, updated_at=datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )
    logger.info(f"Clinic {clinic_id} rating recomputed: {rating} from {count} reviews")
    return rating, count


async def create_review(db: AsyncSession, identity: Identity, data: ReviewCreate) -> Review:
    """Create the review for a confirmed booking owned by the caller.

    Eligibility is re-checked here; the unique constraint on ``booking_id``
    settles concurrent submissions.

    Raises:
        AuthenticationError: Not logged in
        NotFoundError: Booking does not exist
        AuthorizationError: Caller does not own the booking
        ValidationError: Booking is not confirmed
        ConflictError: Booking already has a review
    """
    if not isinstance(identity, RegisteredUser):
        raise AuthenticationError("Login required to write a review")

    booking = await get_booking(db, data.booking_id)
    eligibility = evaluate_review_eligibility(
        identity, booking, await has_review(db, booking.id)
    )
    if not eligibility.allowed:
        if eligibility.reason == NOT_OWNER:
            raise AuthorizationError("You can only review your own bookings")
        if eligibility.reason == NOT_CONFIRMED:
            raise ValidationError("You can only review confirmed bookings")
        if eligibility.reason == ALREADY_REVIEWED:
            raise ConflictError("You have already reviewed this booking")
        raise AuthenticationError("Login required to write a review")

    review = Review(
        booking_id=booking.id,
        clinic_id=booking.clinic_id,
        user_id=identity.id,
        rating=data.rating,
        title=data.title,
        content=data.content,
        procedure=booking.procedure,
        visit_date=visit_date_for(booking),
        locale=booking.locale,
        photos=list(data.photos),
        is_verified=True,
        is_visible=True,
        helpful_count=0,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Concurrent review for booking {data.booking_id} rejected")
        raise ConflictError("You have already reviewed this booking") from e

    await recompute_clinic_rating(db, booking.clinic_id)
    logger.info(f"Review {review.id} created for booking {booking.id} by user {identity.id}")
    return review


async def mark_helpful(db: AsyncSession, review_id: UUID) -> int:
    """Atomically increment the helpful counter and return the new value."""
    result = await db.execute(
        update(Review)
        .where(Review.id == review_id)
        .values(helpful_count=Review.helpful_count + 1)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        raise NotFoundError("Review")
    return await db.scalar(select(Review.helpful_count).where(Review.id == review_id))


async def get_review_stats(db: AsyncSession, clinic_id: UUID) -> dict:
    result = await db.execute(
        select(Review.rating, func.count(Review.id))
        .where(Review.clinic_id == clinic_id, Review.is_visible.is_(True))
        .group_by(Review.rating)
    )
    distribution = {rating: 0 for rating in range(1, 6)}
    for rating, count in result.all():
        distribution[rating] = count

    total = sum(distribution.values())
    weighted = sum(rating * count for rating, count in distribution.items())
    return {
        "average_rating": round_rating(weighted / total) if total else 0.0,
        "total_reviews": total,
        "rating_distribution": distribution,
    }


async def list_clinic_reviews(
    db: AsyncSession,
    clinic_id: UUID,
    sort: str = "recent",
    page: int = 1,
    limit: int = 10,
) -> dict:
    """Visible reviews for a clinic with author info and aggregate stats."""
    await get_clinic(db, clinic_id)
    filters = (Review.clinic_id == clinic_id, Review.is_visible.is_(True))

    total = await db.scalar(select(func.count(Review.id)).where(*filters))
    result = await db.execute(
        select(Review, User.name, User.profile_image)
        .outerjoin(User, Review.user_id == User.id)
        .where(*filters)
        .order_by(*REVIEW_SORTS[sort])
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [
        {"review": review, "user_name": name, "user_profile_image": image}
        for review, name, image in result.all()
    ]
    return {
        "items": items,
        "total": total or 0,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil((total or 0) / limit),
        "stats": await get_review_stats(db, clinic_id),
    }


async def list_user_reviews(db: AsyncSession, user_id: UUID) -> list[tuple[Review, dict | None]]:
    """A user's reviews, newest first, with the clinic name."""
    result = await db.execute(
        select(Review, Clinic.name)
        .outerjoin(Clinic, Review.clinic_id == Clinic.id)
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc())
    )
    return [(review, clinic_name) for review, clinic_name in result.all()]
