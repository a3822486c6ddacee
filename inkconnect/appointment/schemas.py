"""
inkconnect/appointment/schemas.py

Appointment Schemas
Pydantic schemas for appointment-related operations:
- Booking (client)
- Status transitions and detail/payment updates (artist, admin)
- Reading appointments with participant names embedded
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkconnect.database.enums import AppointmentStatus


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---------------------------------------------------
# Booking Schema (Authenticated Client)
# ---------------------------------------------------
class AppointmentCreate(BaseModel):
    """Schema used when a client books a session."""

    artist_id: UUID = Field(..., description="Artist to book")
    appointment_date: datetime = Field(..., description="Session start; naive values are read as UTC")
    duration_hours: Decimal = Field(..., gt=0, le=24, max_digits=5, decimal_places=2)
    description: str | None = Field(None, max_length=5000, description="Tattoo idea")

    @field_validator("appointment_date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ---------------------------------------------------
# Lifecycle and Detail Updates
# ---------------------------------------------------
class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentDetailsUpdate(BaseModel):
    """Notes and payment tracking. Omitted fields are left untouched."""

    notes: str | None = Field(None, max_length=5000)
    actual_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    deposit_amount: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    deposit_paid: bool | None = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------
# Read Schema
# ---------------------------------------------------
class AppointmentRead(BaseModel):
    id: UUID
    client_id: UUID
    artist_id: UUID
    client_profile_id: UUID | None = None
    artist_profile_id: UUID | None = None
    client_name: str | None = None
    artist_name: str | None = None
    appointment_date: datetime
    duration_hours: Decimal
    status: AppointmentStatus
    estimated_price: Decimal | None = None
    actual_price: Decimal | None = None
    deposit_amount: Decimal | None = None
    deposit_paid: bool = False
    description: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    next_statuses: list[AppointmentStatus] = Field(
        default_factory=list, description="Statuses the caller may move this appointment to"
    )

    model_config = ConfigDict(from_attributes=True)
