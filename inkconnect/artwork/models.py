"""
inkconnect/artwork/models.py

Defines the Artwork model.
- Portfolio pieces and client artwork log entries owned by an artist
- Visibility, portfolio flag and progress status
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from inkconnect.database.base import Base, utcnow
from inkconnect.database.enums import ArtworkStatus, enum_values


class Artwork(Base):
    __tablename__ = "artworks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, comment="Unique identifier for the artwork"
    )
    artist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Artist who owns the piece",
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False, comment="Object storage URL")
    style_tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_portfolio_piece: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    status: Mapped[ArtworkStatus] = mapped_column(
        Enum(ArtworkStatus, name="artwork_status", values_callable=enum_values),
        default=ArtworkStatus.COMPLETED,
        nullable=False,
    )
    completion_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )
