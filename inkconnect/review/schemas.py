"""
inkconnect/review/schemas.py

Review Schemas
- Submitting a review for a completed appointment
- Reading reviews and an artist's rating summary
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    appointment_id: UUID = Field(..., description="Completed appointment being reviewed")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    review_text: str | None = Field(None, max_length=5000)
    is_public: bool = True


class ReviewRead(BaseModel):
    id: UUID
    appointment_id: UUID
    artist_id: UUID
    client_id: UUID
    client_name: str | None = None
    rating: int
    review_text: str | None = None
    is_public: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ReviewSummary(BaseModel):
    artist_id: UUID
    average_rating: float | None = Field(None, description="None when the artist has no reviews")
    total_reviews: int
