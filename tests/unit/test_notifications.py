"""Tests for booking email notifications and SendGrid delivery."""

import json
import logging
from datetime import date, timedelta

import httpx
import pytest

from app.config import Settings
from app.core.exceptions import DependencyError
from app.domain.identity import ANONYMOUS
from app.schemas.booking import BookingRequestCreate, ConfirmedOption
from app.services import booking_service
from app.services.email_service import SENDGRID_SEND_URL, BookingEmailData, EmailService
from app.services.email_templates import (
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    format_date_for_email,
    format_price_for_email,
    render_email,
)
from app.services.notification_service import BookingNotifier, build_email_data

EMAIL_DATA = BookingEmailData(
    to="a@x.com",
    access_code="AB12CD34",
    clinic_name="Gangnam Glow Clinic",
    procedure="Botox",
    preferred_date="March 5, 2026",
)


async def make_booking(db, clinic, **overrides):
    values = {
        "clinic_id": clinic.id,
        "procedure": "Botox",
        "preferred_date": date(2026, 3, 5),
        "guest_email": "a@x.com",
        "locale": "ja",
    }
    values.update(overrides)
    booking = await booking_service.create_booking(db, ANONYMOUS, BookingRequestCreate(**values))
    await db.commit()
    return booking


class TestBookingNotifier:
    """Tests for BookingNotifier."""

    async def test_confirmed_sends_localized_email(self, db, clinic, email_service):
        booking = await make_booking(db, clinic)
        booking = await booking_service.apply_transition(
            db,
            booking.id,
            "confirmed",
            confirmed_option=ConfirmedOption(date=date(2026, 3, 7), time_slot="10:30", price=150000),
        )
        notifier = BookingNotifier(email_service)

        task = notifier.notify_status_change(booking)
        assert task is not None
        await notifier.drain()

        assert notifier.pending == 0
        email_type, locale, data = email_service.sent[0]
        assert email_type == BOOKING_CONFIRMED
        assert locale == "ja"
        assert data.to == "a@x.com"
        assert data.clinic_name == "江南グロウクリニック"
        assert data.confirmed_date == "2026年3月7日"
        assert data.confirmed_time == "10:30"
        assert data.confirmed_price == "₩150,000"

    async def test_cancelled_carries_note(self, db, clinic, email_service):
        booking = await make_booking(db, clinic)
        booking = await booking_service.apply_transition(db, booking.id, "cancelled")
        notifier = BookingNotifier(email_service)

        notifier.notify_status_change(booking, note="Clinic closed")
        await notifier.drain()

        email_type, _, data = email_service.sent[0]
        assert email_type == BOOKING_CANCELLED
        assert data.cancel_reason == "Clinic closed"

    @pytest.mark.parametrize("status", ["received", "contactingHospital", "proposedOptions", "noAvailability"])
    async def test_other_statuses_are_silent(self, db, clinic, email_service, status):
        booking = await make_booking(db, clinic)
        booking = await booking_service.apply_transition(db, booking.id, status)
        notifier = BookingNotifier(email_service)

        assert notifier.notify_status_change(booking) is None
        assert email_service.sent == []

    async def test_phone_only_booking_is_silent(self, db, clinic, email_service):
        booking = await make_booking(db, clinic, guest_email=None, guest_phone="+821012345678")
        booking = await booking_service.apply_transition(db, booking.id, "confirmed")

        assert BookingNotifier(email_service).notify_status_change(booking) is None

    async def test_failure_is_logged_not_raised(self, db, clinic, email_service, caplog):
        booking = await make_booking(db, clinic)
        booking = await booking_service.apply_transition(db, booking.id, "confirmed")
        email_service.fail = True
        notifier = BookingNotifier(email_service)

        with caplog.at_level(logging.ERROR, logger="app.services.notification_service"):
            task = notifier.notify_status_change(booking)
            await notifier.drain()

        assert task.result() is False
        assert f"Failed to send booking_confirmed email for booking {booking.id}" in caplog.text

    async def test_build_email_data_falls_back_to_preferred_date(self, db, clinic):
        booking = await make_booking(db, clinic, locale="en")
        booking = await booking_service.apply_transition(db, booking.id, "confirmed")
        data = build_email_data(booking)
        assert data.preferred_date == "March 5, 2026"
        assert data.confirmed_date is None


class TestTemplates:
    def test_unknown_locale_falls_back_to_english(self):
        rendered = render_email(BOOKING_CONFIRMED, "ko", vars(EMAIL_DATA))
        assert rendered.subject == "Booking Confirmed! - Global Beauty"
        assert "AB12CD34" in rendered.body
        assert "To be confirmed" in rendered.body

    def test_cancel_reason_line(self):
        fields = {**vars(EMAIL_DATA), "cancel_reason": "No slots"}
        assert "理由: No slots" in render_email(BOOKING_CANCELLED, "ja", fields).body

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            render_email("booking_received", "en", vars(EMAIL_DATA))

    def test_formatters(self):
        assert format_date_for_email(date(2026, 3, 5), "zh") == "2026年3月5日"
        assert format_price_for_email(99.5, "USD") == "$99.50"
        assert format_price_for_email(12000, "JPY") == "¥12,000"


class TestEmailService:
    """Tests for SendGrid delivery through a mocked transport."""

    def service(self, handler, api_key: str | None = "SG.test") -> EmailService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return EmailService(Settings(sendgrid_api_key=api_key), http_client=client)

    async def test_sends_payload(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(202)

        email_service = self.service(handler)
        assert await email_service.send_booking_email(BOOKING_CONFIRMED, "en", EMAIL_DATA) is True
        await email_service.close()

        request = requests[0]
        assert str(request.url) == SENDGRID_SEND_URL
        assert request.headers["Authorization"] == "Bearer SG.test"
        payload = json.loads(request.content)
        assert payload["personalizations"] == [{"to": [{"email": "a@x.com"}]}]
        assert payload["subject"] == "Booking Confirmed! - Global Beauty"

    async def test_not_configured(self):
        email_service = self.service(lambda request: httpx.Response(202), api_key=None)
        assert await email_service.send_booking_email(BOOKING_CONFIRMED, "en", EMAIL_DATA) is False

    async def test_rejected(self):
        email_service = self.service(lambda request: httpx.Response(500))
        with pytest.raises(DependencyError):
            await email_service.send_booking_email(BOOKING_CONFIRMED, "en", EMAIL_DATA)

    async def test_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        email_service = self.service(handler)
        with pytest.raises(DependencyError, match="sendgrid"):
            await email_service.send_booking_email(BOOKING_CANCELLED, "en", EMAIL_DATA)
