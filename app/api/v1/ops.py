"""Ops (staff) booking queue endpoints."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import AppSettings, DbSession, Notifier
from app.api.v1.bookings import clinic_summary
from app.core.permissions import (
    require_guest_messaging,
    require_queue_access,
    require_stats_access,
    require_status_update,
)
from app.domain.identity import OpsIdentity
from app.schemas.booking import BookingStatus, StatusUpdate, StatusUpdateResponse
from app.schemas.ops import (
    GuestMessageRequest,
    GuestMessageResponse,
    OpsQueue,
    OpsQueueItem,
    OpsStats,
    SlaInfo,
)
from app.services import booking_service

router = APIRouter()


@router.get("/booking-requests", response_model=OpsQueue)
async def get_booking_queue(
    db: DbSession,
    settings: AppSettings,
    ops_user: Annotated[OpsIdentity, Depends(require_queue_access)],
    status_filter: Annotated[BookingStatus | None, Query(alias="status")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> OpsQueue:
    """Booking queue, newest first, with SLA status."""
    items, total = await booking_service.list_ops_queue(
        db,
        status=status_filter,
        page=page,
        limit=limit,
        now=datetime.now(UTC),
        sla_hours=settings.sla_hours,
    )
    return OpsQueue(
        items=[
            OpsQueueItem(
                id=booking.id,
                clinic=clinic_summary(booking),
                user_id=booking.user_id,
                guest_email=booking.guest_email,
                guest_phone=booking.guest_phone,
                access_code=booking.access_code,
                procedure=booking.procedure,
                preferred_date=booking.preferred_date,
                preferred_time_slot=booking.preferred_time_slot,
                locale=booking.locale,
                notes=booking.notes,
                ops_notes=booking.ops_notes,
                status=booking.status,
                proposed_options=booking.proposed_options,
                confirmed_option=booking.confirmed_option,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
                sla=SlaInfo(
                    hours_elapsed=sla.hours_elapsed,
                    hours_remaining=sla.hours_remaining,
                    is_overdue=sla.is_overdue,
                ),
            )
            for booking, sla in items
        ],
        total=total,
        page=page,
        limit=limit,
        total_pages=booking_service.total_pages(total, limit),
    )


@router.post("/booking-requests/{booking_id}/status", response_model=StatusUpdateResponse)
async def update_booking_status(
    booking_id: UUID,
    data: StatusUpdate,
    db: DbSession,
    notifier: Notifier,
    ops_user: Annotated[OpsIdentity, Depends(require_status_update)],
) -> StatusUpdateResponse:
    """Apply a status transition; the guest email goes out after commit."""
    booking = await booking_service.apply_transition(
        db,
        booking_id,
        data.status,
        note=data.note,
        proposed_options=data.proposed_options,
        confirmed_option=data.confirmed_option,
        changed_by=ops_user.id,
    )
    await db.commit()

    notifier.notify_status_change(booking, note=data.note)

    return StatusUpdateResponse(
        id=booking.id,
        status=booking.status,
        message=f"Status updated to {booking.status}",
    )


@router.post("/booking-requests/{booking_id}/message", response_model=GuestMessageResponse)
async def send_guest_message(
    booking_id: UUID,
    data: GuestMessageRequest,
    db: DbSession,
    ops_user: Annotated[OpsIdentity, Depends(require_guest_messaging)],
) -> GuestMessageResponse:
    """Send a templated message to the guest."""
    result = await booking_service.message_guest(
        db, booking_id, data.template, data.custom_message, sent_by=ops_user.id
    )
    return GuestMessageResponse(**result)


@router.get("/stats", response_model=OpsStats)
async def get_stats(
    db: DbSession,
    ops_user: Annotated[OpsIdentity, Depends(require_stats_access)],
) -> OpsStats:
    """Dashboard counters."""
    return OpsStats(**await booking_service.get_stats(db))
