"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

Creates all initial tables for the concierge booking API:
- Clinics
- Users, ops users and sessions
- Booking requests and status history
- Reviews
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== CLINICS ====================
    op.create_table(
        "clinics",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.JSON, nullable=False),
        sa.Column("address", sa.JSON, nullable=False),
        sa.Column("description", sa.JSON),
        sa.Column("city", sa.String(20), nullable=False, index=True),
        sa.Column("phone", sa.String(30), nullable=False),
        sa.Column("languages", sa.JSON),
        sa.Column("tags", sa.JSON),
        sa.Column("images", sa.JSON),
        sa.Column("rating", sa.Float, default=0.0),
        sa.Column("review_count", sa.Integer, default=0),
        sa.Column("is_active", sa.Boolean, default=True, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("provider_id", sa.String(255)),
        sa.Column("locale", sa.String(5), default="en"),
        sa.Column("phone", sa.String(30)),
        sa.Column("profile_image", sa.Text),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("provider", "provider_id", name="uq_users_provider_provider_id"),
    )

    op.create_table(
        "ops_users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, default="operator"),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_type", sa.String(10), nullable=False),
        sa.Column("token", sa.String(128), unique=True, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True)),
        sa.Column("user_agent", sa.Text),
        sa.Column("ip_address", sa.String(45)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_sessions_user_id_expires_at", "sessions", ["user_id", "expires_at"])
    op.create_index("ix_sessions_expires_at", "sessions", ["expires_at"])

    # ==================== BOOKING REQUESTS ====================
    op.create_table(
        "booking_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("clinic_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clinics.id"), nullable=False, index=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), index=True),
        sa.Column("guest_email", sa.String(255), index=True),
        sa.Column("guest_phone", sa.String(30)),
        sa.Column("access_code", sa.String(8), unique=True, nullable=False),
        sa.Column("procedure", sa.String(200), nullable=False),
        sa.Column("preferred_date", sa.Date, nullable=False),
        sa.Column("preferred_time_slot", sa.String(50)),
        sa.Column("budget_min", sa.Integer),
        sa.Column("budget_max", sa.Integer),
        sa.Column("budget_currency", sa.String(3), default="KRW"),
        sa.Column("photos", sa.JSON),
        sa.Column("locale", sa.String(5), default="en"),
        sa.Column("notes", sa.Text),
        sa.Column("status", sa.String(30), default="received", index=True),
        sa.Column("ops_notes", sa.Text),
        sa.Column("proposed_options", sa.JSON),
        sa.Column("confirmed_option", sa.JSON),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_booking_requests_status_created_at", "booking_requests", ["status", "created_at"]
    )
    op.create_index(
        "ix_booking_requests_guest_email_created_at",
        "booking_requests",
        ["guest_email", "created_at"],
    )

    op.create_table(
        "booking_status_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("booking_requests.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("changed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("ops_users.id")),
        sa.Column("note", sa.Text),
    )

    # ==================== REVIEWS ====================
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("booking_requests.id"),
            unique=True,
            nullable=False,
        ),
        sa.Column("clinic_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clinics.id"), nullable=False, index=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("procedure", sa.String(200), nullable=False),
        sa.Column("visit_date", sa.Date, nullable=False),
        sa.Column("locale", sa.String(5), default="en"),
        sa.Column("photos", sa.JSON),
        sa.Column("is_verified", sa.Boolean, default=True),
        sa.Column("is_visible", sa.Boolean, default=True, index=True),
        sa.Column("helpful_count", sa.Integer, default=0),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_clinic_id_created_at", "reviews", ["clinic_id", "created_at"])
    op.create_index("ix_reviews_user_id_created_at", "reviews", ["user_id", "created_at"])


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("reviews")
    op.drop_table("booking_status_history")
    op.drop_table("booking_requests")
    op.drop_table("sessions")
    op.drop_table("ops_users")
    op.drop_table("users")
    op.drop_table("clinics")
