"""Booking request database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base, utcnow
from app.domain.booking_state import INITIAL_STATUS

if TYPE_CHECKING:
    from app.models.clinic import Clinic


class BookingRequest(Base):
    """Booking request submitted by a guest or registered user."""

    __tablename__ = "booking_requests"
    __table_args__ = (
        Index("ix_booking_requests_status_created_at", "status", "created_at"),
        Index("ix_booking_requests_guest_email_created_at", "guest_email", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    clinic_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clinics.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )

    # Contact (guest_email is always stored normalized)
    guest_email: Mapped[str | None] = mapped_column(String(255), index=True)
    guest_phone: Mapped[str | None] = mapped_column(String(30))

    # Capability credential, immutable once issued
    access_code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)

    # Request
    procedure: Mapped[str] = mapped_column(String(200), nullable=False)
    preferred_date: Mapped[date] = mapped_column(Date, nullable=False)
    preferred_time_slot: Mapped[str | None] = mapped_column(String(50))
    budget_min: Mapped[int | None] = mapped_column(Integer)
    budget_max: Mapped[int | None] = mapped_column(Integer)
    budget_currency: Mapped[str] = mapped_column(String(3), default="KRW")  # KRW, USD, JPY, CNY
    photos: Mapped[list] = mapped_column(JSON, default=list)
    locale: Mapped[str] = mapped_column(String(5), default="en")  # en, ja, zh
    notes: Mapped[str | None] = mapped_column(Text)

    # Ops
    status: Mapped[str] = mapped_column(String(30), default=INITIAL_STATUS, index=True)
    ops_notes: Mapped[str | None] = mapped_column(Text)
    proposed_options: Mapped[list | None] = mapped_column(JSON)  # [{date, time_slot, price, note}]
    confirmed_option: Mapped[dict | None] = mapped_column(JSON)  # {date, time_slot, price}

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    clinic: Mapped["Clinic"] = relationship("Clinic", lazy="selectin")
    status_history: Mapped[list["BookingStatusHistory"]] = relationship(
        "BookingStatusHistory",
        back_populates="booking",
        order_by="BookingStatusHistory.id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def budget(self) -> dict:
        return {"min": self.budget_min, "max": self.budget_max, "currency": self.budget_currency}


class BookingStatusHistory(Base):
    """Append-only status history; id order is commit order."""

    __tablename__ = "booking_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("booking_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    changed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ops_users.id")
    )
    note: Mapped[str | None] = mapped_column(Text)

    # Relationships
    booking: Mapped["BookingRequest"] = relationship(
        "BookingRequest", back_populates="status_history"
    )
