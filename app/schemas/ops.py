"""Ops dashboard Pydantic schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.booking import ClinicSummary

MessageTemplate = Literal["received", "contacting", "options", "confirmed", "cancelled"]


class SlaInfo(BaseModel):
    hours_elapsed: float
    hours_remaining: float
    is_overdue: bool


class OpsQueueItem(BaseModel):
    """Booking request as seen in the ops queue."""

    id: UUID
    clinic: ClinicSummary | None
    user_id: UUID | None
    guest_email: str | None
    guest_phone: str | None
    access_code: str
    procedure: str
    preferred_date: date
    preferred_time_slot: str | None
    locale: str
    notes: str | None
    ops_notes: str | None
    status: str
    proposed_options: list[dict] | None = None
    confirmed_option: dict | None = None
    created_at: datetime
    updated_at: datetime
    sla: SlaInfo


class OpsQueue(BaseModel):
    items: list[OpsQueueItem]
    total: int
    page: int
    limit: int
    total_pages: int


class GuestMessageRequest(BaseModel):
    template: MessageTemplate
    custom_message: str | None = Field(None, max_length=2000)


class GuestMessageResponse(BaseModel):
    message: str
    template: str
    recipient: str


class OpsStats(BaseModel):
    """Dashboard counters."""

    status_counts: dict[str, int]
    total_requests: int
    conversion_rate: float
    pending: int


class OpsLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class OpsUserCreate(BaseModel):
    """Schema for creating a staff account."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    role: Literal["admin", "operator"] = "operator"


class OpsUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: str
    is_active: bool = True
    last_login_at: datetime | None = None
