"""Booking request endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import AppSettings, CurrentIdentity, DbSession
from app.core.exceptions import AuthenticationError
from app.domain.booking_access import authorize_booking_access
from app.domain.identity import Anonymous, RegisteredUser
from app.models.booking import BookingRequest
from app.schemas.booking import (
    BookingRequestCreate,
    BookingRequestCreated,
    BookingRequestDetail,
    BookingRequestList,
    BookingRequestListItem,
    Budget,
    ClinicSummary,
    StatusHistoryEntry,
)
from app.services import booking_service
from app.services.identity_service import resolve_guest

router = APIRouter()


def clinic_summary(booking: BookingRequest) -> ClinicSummary | None:
    clinic = booking.clinic
    if clinic is None:
        return None
    return ClinicSummary(
        id=clinic.id,
        name=clinic.name,
        address=clinic.address,
        phone=clinic.phone,
        city=clinic.city,
    )


@router.post("/", response_model=BookingRequestCreated, status_code=status.HTTP_201_CREATED)
async def create_booking_request(
    data: BookingRequestCreate,
    db: DbSession,
    identity: CurrentIdentity,
    settings: AppSettings,
) -> BookingRequestCreated:
    """Submit a booking request as a logged-in user or a guest."""
    booking = await booking_service.create_booking(
        db, identity, data, max_attempts=settings.access_code_max_attempts
    )
    return BookingRequestCreated(
        id=booking.id,
        access_code=booking.access_code,
        status=booking.status,
        message=booking_service.BOOKING_RECEIVED_MESSAGE,
    )


@router.get("/my-requests", response_model=BookingRequestList)
async def list_my_requests(
    db: DbSession,
    identity: CurrentIdentity,
    email: str | None = None,
    access_code: str | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> BookingRequestList:
    """List bookings for the logged-in user, or for a guest proven by email + access code."""
    if not isinstance(identity, RegisteredUser):
        if not email or not access_code:
            raise AuthenticationError(
                "Authentication required. Please provide email and access_code, or login."
            )
        identity = await resolve_guest(db, email, access_code)
        if isinstance(identity, Anonymous):
            raise AuthenticationError("Invalid email or access code")

    bookings, total = await booking_service.list_bookings_for_identity(
        db, identity, status=status_filter, page=page, limit=limit
    )
    return BookingRequestList(
        items=[
            BookingRequestListItem(
                id=booking.id,
                clinic=clinic_summary(booking),
                procedure=booking.procedure,
                preferred_date=booking.preferred_date,
                preferred_time_slot=booking.preferred_time_slot,
                status=booking.status,
                access_code=booking.access_code,
                created_at=booking.created_at,
                confirmed_option=booking.confirmed_option,
            )
            for booking in bookings
        ],
        total=total,
        page=page,
        limit=limit,
        total_pages=booking_service.total_pages(total, limit),
    )


@router.get("/{booking_id}", response_model=BookingRequestDetail)
async def get_booking_request(
    booking_id: UUID,
    db: DbSession,
    identity: CurrentIdentity,
    access_code: str | None = None,
) -> BookingRequestDetail:
    """Booking detail for its owner or anyone holding the access code."""
    booking = await booking_service.get_booking(db, booking_id)
    authorize_booking_access(identity, booking, access_code)

    return BookingRequestDetail(
        id=booking.id,
        clinic=clinic_summary(booking),
        procedure=booking.procedure,
        preferred_date=booking.preferred_date,
        preferred_time_slot=booking.preferred_time_slot,
        budget=Budget(**booking.budget),
        notes=booking.notes,
        status=booking.status,
        status_history=[StatusHistoryEntry.model_validate(entry) for entry in booking.status_history],
        proposed_options=booking.proposed_options,
        confirmed_option=booking.confirmed_option,
        access_code=booking.access_code,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )
