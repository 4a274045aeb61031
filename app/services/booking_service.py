"""Booking request lifecycle.

Creation, lookups and ops status transitions. Status changes never overwrite
history: each transition inserts one ``booking_status_history`` row in the same
transaction as the status update.
"""

import logging
import math
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.domain.booking_state import (
    INITIAL_STATUS,
    STATS_PENDING_STATUSES,
    STATS_TOTAL_STATUSES,
    CONFIRMED,
    is_suggested_transition,
)
from app.domain.identity import GuestIdentity, Identity, RegisteredUser
from app.domain.sla import DEFAULT_SLA_HOURS, SlaSnapshot, compute_sla
from app.models.booking import BookingRequest, BookingStatusHistory
from app.models.clinic import Clinic
from app.schemas.booking import BookingRequestCreate, ConfirmedOption, ProposedOption
from app.utils.access_code import generate_access_code
from app.utils.validators import mask_email, normalize_email, normalize_phone

logger = logging.getLogger(__name__)

BOOKING_RECEIVED_MESSAGE = "Booking request received. We will contact you soon."

GUEST_MESSAGE_TEMPLATES = {
    "received": "Your booking request {access_code} has been received.",
    "contacting": "We are contacting the clinic about your booking request {access_code}.",
    "options": "Appointment options are available for your booking request {access_code}.",
    "confirmed": "Your booking {access_code} is confirmed.",
    "cancelled": "Your booking {access_code} has been cancelled.",
}


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def get_clinic(db: AsyncSession, clinic_id: UUID) -> Clinic:
    clinic = await db.get(Clinic, clinic_id)
    if clinic is None:
        raise NotFoundError("Clinic")
    return clinic


async def get_booking(db: AsyncSession, booking_id: UUID) -> BookingRequest:
    """Load a booking with clinic and history, refreshing any cached copy."""
    result = await db.execute(
        select(BookingRequest)
        .where(BookingRequest.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking request")
    return booking


async def find_booking(db: AsyncSession, booking_id: UUID) -> BookingRequest | None:
    try:
        return await get_booking(db, booking_id)
    except NotFoundError:
        return None


async def create_booking(
    db: AsyncSession,
    identity: Identity,
    data: BookingRequestCreate,
    max_attempts: int = 5,
    now: datetime | None = None,
) -> BookingRequest:
    """Create a booking request in ``received`` with its first history entry.

    Args:
        db: Database session
        identity: Acting identity; a logged-in user's email wins over guest_email
        data: Validated request body
        max_attempts: Access code draws before giving up
        now: Creation time

    Returns:
        BookingRequest: The new booking, including its access code

    Raises:
        NotFoundError: Clinic does not exist
        ValidationError: No email or phone to contact the guest
        ConflictError: No unique access code could be allocated
    """
    clinic = await get_clinic(db, data.clinic_id)

    user_id = None
    email = normalize_email(data.guest_email)
    if isinstance(identity, RegisteredUser):
        user_id = identity.id
        email = normalize_email(identity.email)
    phone = normalize_phone(data.guest_phone)

    if not email and not phone:
        raise ValidationError("Either email or phone is required")

    now = now or datetime.now(UTC)
    access_code = await generate_access_code(db, max_attempts)
    budget = data.budget
    booking = BookingRequest(
        id=uuid.uuid4(),
        clinic=clinic,
        user_id=user_id,
        guest_email=email,
        guest_phone=phone,
        access_code=access_code,
        procedure=data.procedure,
        preferred_date=data.preferred_date,
        preferred_time_slot=data.preferred_time_slot,
        budget_min=budget.min if budget else None,
        budget_max=budget.max if budget else None,
        budget_currency=budget.currency if budget else "KRW",
        photos=list(data.photos),
        locale=data.locale,
        notes=data.notes,
        status=INITIAL_STATUS,
        created_at=now,
        updated_at=now,
        status_history=[BookingStatusHistory(status=INITIAL_STATUS, changed_at=now)],
    )
    db.add(booking)

    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Access code collision on insert: {access_code}")
        raise ConflictError("Could not allocate a unique access code, please retry") from e

    logger.info(
        f"Booking request {booking.id} created for clinic {clinic.id} "
        f"({'user ' + str(user_id) if user_id else 'guest ' + mask_email(email)})"
    )
    return booking


def _ownership_filter(identity: Identity):
    if isinstance(identity, RegisteredUser):
        return or_(
            BookingRequest.user_id == identity.id,
            BookingRequest.guest_email == normalize_email(identity.email),
        )
    if isinstance(identity, GuestIdentity):
        return BookingRequest.guest_email == normalize_email(identity.email)
    raise AuthenticationError()


async def list_bookings_for_identity(
    db: AsyncSession,
    identity: Identity,
    status: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[BookingRequest], int]:
    """Bookings owned by a user (by id or email) or a guest (by email), newest first."""
    filters = [_ownership_filter(identity)]
    if status:
        filters.append(BookingRequest.status == status)

    total = await db.scalar(select(func.count(BookingRequest.id)).where(*filters))
    result = await db.execute(
        select(BookingRequest)
        .where(*filters)
        .order_by(BookingRequest.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def apply_transition(
    db: AsyncSession,
    booking_id: UUID,
    new_status: str,
    note: str | None = None,
    proposed_options: Sequence[ProposedOption] | None = None,
    confirmed_option: ConfirmedOption | None = None,
    changed_by: UUID | None = None,
    now: datetime | None = None,
) -> BookingRequest:
    """Move a booking to ``new_status``.

    Any status may follow any other. The status update, option replacement and
    history insert are flushed together and commit or roll back as one unit.
    History is appended even when the status does not change.

    Raises:
        NotFoundError: Booking does not exist
    """
    booking = await get_booking(db, booking_id)
    previous_status = booking.status
    now = now or datetime.now(UTC)

    values: dict = {"status": new_status, "updated_at": now}
    if proposed_options is not None:
        # Replaced wholesale, never merged
        values["proposed_options"] = [option.model_dump(mode="json") for option in proposed_options]
    if confirmed_option is not None:
        values["confirmed_option"] = confirmed_option.model_dump(mode="json")

    await db.execute(
        update(BookingRequest)
        .where(BookingRequest.id == booking_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    db.add(
        BookingStatusHistory(
            booking_id=booking_id,
            status=new_status,
            changed_at=now,
            changed_by=changed_by,
            note=note,
        )
    )
    await db.flush()

    if not is_suggested_transition(previous_status, new_status):
        logger.warning(
            f"Booking {booking_id}: unusual transition {previous_status} -> {new_status} "
            f"by ops user {changed_by}"
        )
    logger.info(
        f"Booking {booking_id}: {previous_status} -> {new_status} by ops user {changed_by}"
    )
    return await get_booking(db, booking_id)


async def list_ops_queue(
    db: AsyncSession,
    status: str | None = None,
    page: int = 1,
    limit: int = 50,
    now: datetime | None = None,
    sla_hours: int = DEFAULT_SLA_HOURS,
) -> tuple[list[tuple[BookingRequest, SlaSnapshot]], int]:
    """Ops queue, newest first, each booking paired with its SLA projection."""
    filters = [BookingRequest.status == status] if status else []

    total = await db.scalar(select(func.count(BookingRequest.id)).where(*filters))
    result = await db.execute(
        select(BookingRequest)
        .where(*filters)
        .order_by(BookingRequest.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    now = now or datetime.now(UTC)
    items = [
        (booking, compute_sla(booking.created_at, booking.status, now, sla_hours))
        for booking in result.scalars().all()
    ]
    return items, total or 0


async def get_stats(db: AsyncSession) -> dict:
    """Status counts and conversion figures for the ops dashboard."""
    result = await db.execute(
        select(BookingRequest.status, func.count(BookingRequest.id)).group_by(
            BookingRequest.status
        )
    )
    status_counts = {status: count for status, count in result.all()}

    total_requests = sum(status_counts.get(status, 0) for status in STATS_TOTAL_STATUSES)
    conversion_rate = (
        status_counts.get(CONFIRMED, 0) / total_requests * 100 if total_requests else 0.0
    )
    return {
        "status_counts": status_counts,
        "total_requests": total_requests,
        "conversion_rate": round(conversion_rate, 1),
        "pending": sum(status_counts.get(status, 0) for status in STATS_PENDING_STATUSES),
    }


async def message_guest(
    db: AsyncSession,
    booking_id: UUID,
    template: str,
    custom_message: str | None = None,
    sent_by: UUID | None = None,
) -> dict:
    """Record an outbound templated message to the guest.

    Raises:
        NotFoundError: Booking does not exist
        ValidationError: Booking has no email or phone
    """
    booking = await get_booking(db, booking_id)
    recipient = booking.guest_email or booking.guest_phone
    if not recipient:
        raise ValidationError("Booking has no contact information")

    text = custom_message or GUEST_MESSAGE_TEMPLATES[template].format(
        access_code=booking.access_code
    )
    logger.info(
        f"Sending {template} message for booking {booking_id} to "
        f"{mask_email(recipient) if '@' in recipient else recipient} by ops user {sent_by}: {text!r}"
    )
    return {
        "message": "Message sent successfully",
        "template": template,
        "recipient": recipient,
    }
