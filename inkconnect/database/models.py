"""
inkconnect/database/models.py

Core SQLAlchemy ORM Models

Defines:
- Profile: Authenticated accounts with role-based access
- SiteSetting: Single-key persisted settings for the public site

Imports every domain model so `Base.metadata` is complete for
Alembic, `init_db` and the test database.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkconnect.database.base import Base, utcnow
from inkconnect.database.enums import UserRole, enum_values
from inkconnect.artist.models import Artist
from inkconnect.client.models import Client
from inkconnect.appointment.models import Appointment
from inkconnect.messaging.models import Message
from inkconnect.artwork.models import Artwork
from inkconnect.review.models import Review

__all__ = ["Profile", "SiteSetting", "Artist", "Client", "Appointment", "Message", "Artwork", "Review"]

# ---------------------------------------------------
# Profile Model: Authenticated Platform Account
# ---------------------------------------------------


class Profile(Base):
    __tablename__ = "profiles"

    # -------------------------------------
    # Fields
    # -------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the profile",
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False, comment="Profile email address"
    )
    full_name: Mapped[str | None] = mapped_column(
        String(200), nullable=True, comment="Display name"
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.CLIENT,
        comment="Profile role (client, artist, manager, owner)",
    )
    profile_image: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="URL of the profile picture (optional)"
    )
    hashed_password: Mapped[str] = mapped_column(
        String, nullable=False, comment="Hashed password for authentication"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, comment="Whether the account may sign in"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        comment="Timestamp when the profile was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="Timestamp when the profile was last updated",
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------

    # One-to-One: present when role is artist
    artist: Mapped[Optional["Artist"]] = relationship(
        "Artist", back_populates="profile", uselist=False, lazy="noload"
    )

    # One-to-One: present when role is client
    client: Mapped[Optional["Client"]] = relationship(
        "Client", back_populates="profile", uselist=False, lazy="noload"
    )


# ---------------------------------------------------
# SiteSetting Model: Key/Value Site Configuration
# ---------------------------------------------------


class SiteSetting(Base):
    __tablename__ = "site_settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True, comment="Setting name")
    value: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Setting value")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="Timestamp when the setting was last written",
    )
