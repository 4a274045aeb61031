"""Booking status notifications.

Emails go out after the status change has committed, on a background task the
request never awaits. Delivery failures are logged and dropped; retries belong
to the email provider.
"""

import asyncio
import logging
from datetime import date
from typing import Protocol

from app.domain.booking_state import CANCELLED, CONFIRMED, NOTIFY_STATUSES
from app.models.booking import BookingRequest
from app.services.email_service import BookingEmailData
from app.services.email_templates import (
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    format_date_for_email,
    format_price_for_email,
)

logger = logging.getLogger(__name__)

EMAIL_TYPE_BY_STATUS = {
    CONFIRMED: BOOKING_CONFIRMED,
    CANCELLED: BOOKING_CANCELLED,
}


class EmailSender(Protocol):
    async def send_booking_email(
        self, email_type: str, locale: str | None, data: BookingEmailData
    ) -> bool: ...


def should_notify(booking: BookingRequest) -> bool:
    """Only confirmed/cancelled bookings with an email address notify."""
    return booking.status in NOTIFY_STATUSES and bool(booking.guest_email)


def build_email_data(booking: BookingRequest, note: str | None = None) -> BookingEmailData:
    """Snapshot the booking into template fields."""
    locale = booking.locale
    clinic_name = booking.clinic.localized("name", locale) if booking.clinic else ""

    confirmed_date = confirmed_time = confirmed_price = None
    if booking.status == CONFIRMED and booking.confirmed_option:
        option = booking.confirmed_option
        if option.get("date"):
            confirmed_date = format_date_for_email(date.fromisoformat(option["date"]), locale)
        confirmed_time = option.get("time_slot")
        if option.get("price") is not None:
            confirmed_price = format_price_for_email(option["price"], booking.budget_currency)

    return BookingEmailData(
        to=booking.guest_email,
        access_code=booking.access_code,
        clinic_name=clinic_name,
        procedure=booking.procedure,
        preferred_date=format_date_for_email(booking.preferred_date, locale),
        confirmed_date=confirmed_date,
        confirmed_time=confirmed_time,
        confirmed_price=confirmed_price,
        cancel_reason=note if booking.status == CANCELLED else None,
    )


class BookingNotifier:
    """Schedules booking emails without blocking the caller."""

    def __init__(self, email_service: EmailSender) -> None:
        self.email_service = email_service
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def notify_status_change(
        self, booking: BookingRequest, note: str | None = None
    ) -> asyncio.Task | None:
        """Fire the email for a committed status change, if it qualifies.

        Returns the scheduled task, or None when nothing is sent.
        """
        if not should_notify(booking):
            return None

        email_type = EMAIL_TYPE_BY_STATUS[booking.status]
        data = build_email_data(booking, note)
        task = asyncio.create_task(
            self._deliver(str(booking.id), email_type, booking.locale, data)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(
        self, booking_id: str, email_type: str, locale: str, data: BookingEmailData
    ) -> bool:
        try:
            sent = await self.email_service.send_booking_email(email_type, locale, data)
        except Exception:
            logger.exception(f"Failed to send {email_type} email for booking {booking_id}")
            return False

        if sent:
            logger.info(f"Sent {email_type} email for booking {booking_id}")
        else:
            logger.warning(f"{email_type} email for booking {booking_id} was not sent")
        return sent

    async def drain(self) -> None:
        """Wait for outstanding deliveries (shutdown and tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
