"""
inkconnect/artist/schemas.py

Artist Schemas
- Public artist card / detail (directory)
- Artist self-service update
- Admin update (may also toggle availability and rates of any artist)
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from inkconnect.core.validators import clean_tags


class ArtistRead(BaseModel):
    """Artist role record merged with the owning profile's public fields."""

    id: UUID
    profile_id: UUID
    full_name: str | None = None
    profile_image: str | None = None
    bio: str = ""
    specializations: list[str] = Field(default_factory=list)
    hourly_rate: Decimal | None = None
    experience_years: int | None = None
    is_available: bool = True
    instagram_handle: str | None = None
    facebook_url: str | None = None
    website_url: str | None = None
    working_hours: dict[str, Any] | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ArtistUpdate(BaseModel):
    """Fields an artist may change on their own record. Omitted fields are left untouched."""

    bio: str | None = Field(None, max_length=5000)
    specializations: list[str] | None = None
    hourly_rate: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    experience_years: int | None = Field(None, ge=0, le=80)
    is_available: bool | None = None
    instagram_handle: str | None = Field(None, max_length=100)
    facebook_url: HttpUrl | None = None
    website_url: HttpUrl | None = None
    working_hours: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("specializations")
    @classmethod
    def normalize_specializations(cls, value: list[str] | None) -> list[str] | None:
        return clean_tags(value) if value is not None else None

    @field_validator("instagram_handle")
    @classmethod
    def strip_at(cls, value: str | None) -> str | None:
        return value.strip().lstrip("@") if value else value
