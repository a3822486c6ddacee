"""
inkconnect/profile/schemas.py

Profile Schemas
- Reading a profile (self and admin views)
- Self-service profile updates (role is never writable here)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from inkconnect.database.enums import UserRole


class ProfileRead(BaseModel):
    """Profile as returned to its owner and to admins."""

    id: UUID
    email: EmailStr
    full_name: str | None = None
    role: UserRole
    profile_image: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfilePublic(BaseModel):
    """Minimal profile fields embedded in other resources."""

    id: UUID
    full_name: str | None = None
    profile_image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Self-service update. Role and email are not writable here."""

    full_name: str = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(extra="forbid")

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name cannot be blank.")
        return value
