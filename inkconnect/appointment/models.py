"""
inkconnect/appointment/models.py

Defines the Appointment model.
- A booked session between a client and an artist
- Tracks lifecycle status, pricing and deposit payment
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Numeric, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkconnect.database.base import Base, utcnow
from inkconnect.database.enums import AppointmentStatus, enum_values

if TYPE_CHECKING:
    from inkconnect.artist.models import Artist
    from inkconnect.client.models import Client


class Appointment(Base):
    __tablename__ = "appointments"

    # Basic Identifiers & Foreign Keys
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, comment="Unique identifier for the appointment"
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Client who booked the appointment",
    )
    artist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Artist performing the appointment",
    )

    # Scheduling & Status
    appointment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True, comment="Start of the session"
    )
    duration_hours: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, comment="Planned session length in hours"
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus, name="appointment_status", values_callable=enum_values),
        default=AppointmentStatus.PENDING,
        nullable=False,
        comment="Current lifecycle status",
    )

    # Pricing & Payment
    estimated_price: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True, comment="hourly_rate x duration_hours at booking time"
    )
    actual_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    deposit_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Free Text
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Tattoo idea")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Artist notes")

    # Audit Fields
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    client: Mapped["Client"] = relationship("Client", lazy="joined")
    artist: Mapped["Artist"] = relationship("Artist", lazy="joined")
