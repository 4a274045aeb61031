"""Booking request Pydantic schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Currency = Literal["KRW", "USD", "JPY", "CNY"]
BookingStatus = Literal[
    "received",
    "contactingHospital",
    "proposedOptions",
    "confirmed",
    "cancelled",
    "needsMoreInfo",
    "noAvailability",
]
Locale = Literal["en", "ja", "zh"]


class Budget(BaseModel):
    """Budget range for a booking request."""

    min: int | None = Field(None, ge=0)
    max: int | None = Field(None, ge=0)
    currency: Currency = "KRW"


class ProposedOption(BaseModel):
    """Appointment slot offered by ops."""

    date: date
    time_slot: str = Field(..., min_length=1, max_length=50)
    price: float = Field(..., ge=0)
    note: str | None = Field(None, max_length=500)


class ConfirmedOption(BaseModel):
    """Finalized appointment slot."""

    date: date
    time_slot: str = Field(..., min_length=1, max_length=50)
    price: float = Field(..., ge=0)


class StatusHistoryEntry(BaseModel):
    """One status history row."""

    model_config = ConfigDict(from_attributes=True)

    status: str
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None


class ClinicSummary(BaseModel):
    """Clinic fields embedded in booking responses."""

    id: UUID
    name: dict[str, str]
    address: dict[str, str] | None = None
    phone: str | None = None
    city: str | None = None


class BookingRequestCreate(BaseModel):
    """Schema for creating a booking request."""

    clinic_id: UUID
    procedure: str = Field(..., min_length=1, max_length=200)
    preferred_date: date
    preferred_time_slot: str | None = Field(None, max_length=50)
    budget: Budget | None = None
    guest_email: EmailStr | None = None
    guest_phone: str | None = Field(None, max_length=30)
    photos: list[str] = Field(default_factory=list, max_length=10)
    locale: Locale = "en"
    notes: str | None = Field(None, max_length=2000)

    @field_validator("procedure")
    @classmethod
    def validate_procedure(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("procedure must not be blank")
        return v.strip()


class BookingRequestCreated(BaseModel):
    """Response returned after booking creation."""

    id: UUID
    access_code: str
    status: str
    message: str


class BookingRequestListItem(BaseModel):
    """Booking request row in the "my requests" list."""

    id: UUID
    clinic: ClinicSummary | None
    procedure: str
    preferred_date: date
    preferred_time_slot: str | None
    status: str
    access_code: str
    created_at: datetime
    confirmed_option: dict | None = None


class BookingRequestList(BaseModel):
    """Paginated booking request list."""

    items: list[BookingRequestListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class BookingRequestDetail(BaseModel):
    """Full booking request, including history."""

    id: UUID
    clinic: ClinicSummary | None
    procedure: str
    preferred_date: date
    preferred_time_slot: str | None
    budget: Budget
    notes: str | None
    status: str
    status_history: list[StatusHistoryEntry]
    proposed_options: list[dict] | None = None
    confirmed_option: dict | None = None
    access_code: str
    created_at: datetime
    updated_at: datetime


class StatusUpdate(BaseModel):
    """Ops status transition payload."""

    status: BookingStatus
    note: str | None = Field(None, max_length=1000)
    proposed_options: list[ProposedOption] | None = None
    confirmed_option: ConfirmedOption | None = None


class StatusUpdateResponse(BaseModel):
    id: UUID
    status: str
    message: str
