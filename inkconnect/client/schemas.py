"""
inkconnect/client/schemas.py

Client Schemas
- Reading a client record merged with profile fields
- Client self-service update
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ClientRead(BaseModel):
    id: UUID
    profile_id: UUID
    full_name: str | None = None
    email: EmailStr | None = None
    profile_image: str | None = None
    preferred_artist_id: UUID | None = None
    phone_number: str | None = None
    date_of_birth: date | None = None
    medical_conditions: str | None = None
    allergies: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ClientUpdate(BaseModel):
    """Omitted fields are left untouched."""

    preferred_artist_id: UUID | None = None
    phone_number: str | None = Field(None, max_length=30)
    date_of_birth: date | None = None
    medical_conditions: str | None = None
    allergies: str | None = None
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=30)

    model_config = ConfigDict(extra="forbid")
