"""
inkconnect/artwork/schemas.py

Artwork Schemas
- Upload metadata (sent as multipart form fields next to the image)
- Editing, status and visibility changes
- Reading artwork and portfolio statistics
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkconnect.core.validators import clean_tags
from inkconnect.database.enums import ArtworkStatus


class ArtworkUploadMeta(BaseModel):
    """Metadata accompanying an uploaded image. Title is checked by the service."""

    title: str = ""
    description: str | None = None
    style_tags: list[str] = Field(default_factory=list)
    is_public: bool = True
    is_portfolio_piece: bool = True
    status: ArtworkStatus = ArtworkStatus.COMPLETED
    client_id: UUID | None = None
    appointment_id: UUID | None = None
    completion_date: datetime | None = None

    @field_validator("style_tags", mode="before")
    @classmethod
    def split_tags(cls, value: object) -> list[str]:
        # multipart forms send either repeated fields or one comma-separated value
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list) and len(value) == 1 and isinstance(value[0], str):
            value = value[0].split(",")
        return clean_tags(list(value))  # type: ignore[arg-type]


class ArtworkUpdate(BaseModel):
    """Omitted fields are left untouched."""

    title: str | None = Field(None, max_length=200)
    description: str | None = None
    style_tags: list[str] | None = None
    is_portfolio_piece: bool | None = None
    client_id: UUID | None = None
    completion_date: datetime | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Title cannot be blank.")
        return value

    @field_validator("style_tags")
    @classmethod
    def normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return clean_tags(value) if value is not None else None


class ArtworkStatusUpdate(BaseModel):
    status: ArtworkStatus


class ArtworkRead(BaseModel):
    id: UUID
    artist_id: UUID
    client_id: UUID | None = None
    appointment_id: UUID | None = None
    title: str
    description: str | None = None
    image_url: str
    style_tags: list[str] = Field(default_factory=list)
    is_public: bool
    is_portfolio_piece: bool
    status: ArtworkStatus
    completion_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PortfolioStats(BaseModel):
    total: int
    public: int
    private: int
    portfolio_pieces: int
