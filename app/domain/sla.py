"""Ops queue response-time projection.

Computed on every read from ``created_at`` and the current time; never stored.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from app.domain.booking_state import RECEIVED

DEFAULT_SLA_HOURS = 8


@dataclass(frozen=True)
class SlaSnapshot:
    hours_elapsed: float
    hours_remaining: float
    is_overdue: bool


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def compute_sla(
    created_at: datetime,
    status: str,
    now: datetime,
    sla_hours: int = DEFAULT_SLA_HOURS,
) -> SlaSnapshot:
    """Project SLA fields for a booking.

    Args:
        created_at: Booking creation time
        status: Current booking status
        now: Reference time
        sla_hours: Response window in hours

    Returns:
        SlaSnapshot with hours rounded to one decimal. Overdue is judged on the
        unrounded value and only applies to bookings still in ``received``.
    """
    hours_elapsed = (as_utc(now) - as_utc(created_at)).total_seconds() / 3600
    return SlaSnapshot(
        hours_elapsed=round(hours_elapsed, 1),
        hours_remaining=max(0.0, round(sla_hours - hours_elapsed, 1)),
        is_overdue=hours_elapsed > sla_hours and status == RECEIVED,
    )
