"""Tests for booking creation, access codes and status transitions."""

from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.domain.identity import ANONYMOUS, GuestIdentity
from app.models.booking import BookingRequest, BookingStatusHistory
from app.schemas.booking import BookingRequestCreate, ConfirmedOption, ProposedOption
from app.services import booking_service
from helpers import as_registered


def create_data(clinic, **overrides) -> BookingRequestCreate:
    values = {
        "clinic_id": clinic.id,
        "procedure": "Botox consultation",
        "preferred_date": date.today() + timedelta(days=14),
        "guest_email": "A@X.com",
    }
    values.update(overrides)
    return BookingRequestCreate(**values)


def fixed_codes(monkeypatch, *codes: str) -> None:
    draws = iter(codes)
    monkeypatch.setattr("app.utils.access_code.random_access_code", lambda: next(draws))


class TestCreateBooking:
    """Tests for booking_service.create_booking."""

    async def test_guest_booking(self, db, clinic):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()

        assert booking.status == "received"
        assert booking.guest_email == "a@x.com"
        assert booking.user_id is None
        assert len(booking.access_code) == 8
        assert booking.access_code == booking.access_code.upper()
        assert [entry.status for entry in booking.status_history] == ["received"]

    async def test_login_email_wins(self, db, clinic, user):
        booking = await booking_service.create_booking(
            db, as_registered(user), create_data(clinic, guest_email="other@x.com")
        )
        assert booking.user_id == user.id
        assert booking.guest_email == user.email

    async def test_phone_only_is_enough(self, db, clinic):
        booking = await booking_service.create_booking(
            db, ANONYMOUS, create_data(clinic, guest_email=None, guest_phone="+82 10-1234-5678")
        )
        assert booking.guest_email is None
        assert booking.guest_phone == "+821012345678"

    async def test_requires_contact(self, db, clinic):
        with pytest.raises(ValidationError, match="Either email or phone is required"):
            await booking_service.create_booking(
                db, ANONYMOUS, create_data(clinic, guest_email=None)
            )

    async def test_unknown_clinic(self, db, clinic_factory):
        clinic = await clinic_factory()
        await db.delete(clinic)
        await db.commit()
        with pytest.raises(NotFoundError):
            await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))

    async def test_access_code_collision_is_retried(self, db, clinic, monkeypatch):
        fixed_codes(monkeypatch, "AB12CD34")
        first = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()

        fixed_codes(monkeypatch, "AB12CD34", "AB12CD34", "EF56AB78")
        second = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()

        assert first.access_code == "AB12CD34"
        assert second.access_code == "EF56AB78"

    async def test_access_code_exhaustion_fails(self, db, clinic, monkeypatch):
        fixed_codes(monkeypatch, "AB12CD34")
        await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()

        monkeypatch.setattr("app.utils.access_code.random_access_code", lambda: "AB12CD34")
        with pytest.raises(ConflictError):
            await booking_service.create_booking(
                db, ANONYMOUS, create_data(clinic), max_attempts=3
            )

        count = await db.scalar(select(func.count(BookingRequest.id)))
        assert count == 1


class TestApplyTransition:
    """Tests for booking_service.apply_transition."""

    async def test_history_grows_in_call_order(self, db, clinic, ops_user):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()

        statuses = ["contactingHospital", "needsMoreInfo", "contactingHospital", "cancelled"]
        for status in statuses:
            booking = await booking_service.apply_transition(
                db, booking.id, status, changed_by=ops_user.id
            )
            await db.commit()

        assert booking.status == "cancelled"
        assert len(booking.status_history) == len(statuses) + 1
        assert [entry.status for entry in booking.status_history] == ["received", *statuses]
        assert all(entry.changed_by == ops_user.id for entry in booking.status_history[1:])

    async def test_any_status_may_follow_any_other(self, db, clinic):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        booking = await booking_service.apply_transition(db, booking.id, "cancelled")
        booking = await booking_service.apply_transition(db, booking.id, "received")
        assert booking.status == "received"

    async def test_same_status_still_appends_history(self, db, clinic):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        booking = await booking_service.apply_transition(db, booking.id, "received", note="ping")
        assert len(booking.status_history) == 2
        assert booking.status_history[-1].note == "ping"

    async def test_options_are_replaced(self, db, clinic):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        slot = date.today() + timedelta(days=20)
        await booking_service.apply_transition(
            db,
            booking.id,
            "proposedOptions",
            proposed_options=[
                ProposedOption(date=slot, time_slot="10:00", price=100000),
                ProposedOption(date=slot, time_slot="15:00", price=120000),
            ],
        )
        booking = await booking_service.apply_transition(
            db,
            booking.id,
            "proposedOptions",
            proposed_options=[ProposedOption(date=slot, time_slot="11:00", price=90000)],
        )
        assert [option["time_slot"] for option in booking.proposed_options] == ["11:00"]

        booking = await booking_service.apply_transition(
            db,
            booking.id,
            "confirmed",
            confirmed_option=ConfirmedOption(date=slot, time_slot="11:00", price=90000),
        )
        assert booking.confirmed_option == {
            "date": slot.isoformat(),
            "time_slot": "11:00",
            "price": 90000.0,
        }
        # Proposed options survive when not supplied
        assert len(booking.proposed_options) == 1

    async def test_missing_booking(self, db, clinic):
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await db.commit()
        await db.delete(booking)
        await db.commit()

        with pytest.raises(NotFoundError, match="Booking request not found"):
            await booking_service.apply_transition(db, booking.id, "confirmed")
        count = await db.scalar(select(func.count(BookingStatusHistory.id)))
        assert count == 0


class TestListings:
    async def test_guest_sees_bookings_by_email(self, db, clinic):
        await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await booking_service.create_booking(db, ANONYMOUS, create_data(clinic, guest_email="a@x.com"))
        await booking_service.create_booking(db, ANONYMOUS, create_data(clinic, guest_email="b@x.com"))
        await db.commit()

        bookings, total = await booking_service.list_bookings_for_identity(
            db, GuestIdentity(email="a@x.com")
        )
        assert total == 2
        assert {booking.guest_email for booking in bookings} == {"a@x.com"}

    async def test_stats(self, db, clinic, ops_user):
        for _ in range(3):
            await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        booking = await booking_service.create_booking(db, ANONYMOUS, create_data(clinic))
        await booking_service.apply_transition(db, booking.id, "confirmed", changed_by=ops_user.id)
        await db.commit()

        stats = await booking_service.get_stats(db)
        assert stats["status_counts"] == {"received": 3, "confirmed": 1}
        assert stats["total_requests"] == 4
        assert stats["conversion_rate"] == 25.0
        assert stats["pending"] == 3

    def test_total_pages(self):
        assert booking_service.total_pages(0, 10) == 0
        assert booking_service.total_pages(11, 10) == 2
