"""Clinic database model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.database import Base, utcnow


class Clinic(Base):
    """Clinic directory entry.

    Name, address and description are stored per locale: {"en": ..., "ja": ..., "zh": ...}.
    ``rating`` and ``review_count`` are a projection of visible reviews and are
    recomputed by the review service, never edited directly.
    """

    __tablename__ = "clinics"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[dict] = mapped_column(JSON, nullable=False)
    address: Mapped[dict] = mapped_column(JSON, nullable=False)
    description: Mapped[dict | None] = mapped_column(JSON)
    city: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # seoul, busan, jeju
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    languages: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    images: Mapped[list] = mapped_column(JSON, default=list)

    # Review aggregate
    rating: Mapped[float] = mapped_column(Float, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    def localized(self, field: str, locale: str = "en") -> str:
        """Return a per-locale text field, falling back to English."""
        values = getattr(self, field) or {}
        return values.get(locale) or values.get("en") or ""
