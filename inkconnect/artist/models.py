"""
inkconnect/artist/models.py

Defines the Artist model.
- Role record for profiles with the artist role
- Holds portfolio-facing details, rates and availability
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkconnect.database.base import Base, utcnow

if TYPE_CHECKING:
    from inkconnect.database.models import Profile


class Artist(Base):
    __tablename__ = "artists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, comment="Unique identifier for the artist"
    )
    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        comment="Profile this role record belongs to",
    )
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False, comment="Public biography")
    specializations: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False, comment="Tattoo styles the artist works in"
    )
    hourly_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True, comment="Hourly rate used for price estimates"
    )
    experience_years: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="Years of professional experience"
    )
    is_available: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, comment="Whether the artist accepts new bookings"
    )
    instagram_handle: Mapped[str | None] = mapped_column(String(100), nullable=True)
    facebook_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    working_hours: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, comment="Weekly schedule keyed by day"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    profile: Mapped["Profile"] = relationship("Profile", back_populates="artist", lazy="joined")
