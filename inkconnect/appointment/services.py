"""
inkconnect/appointment/services.py

Appointment Service Layer
Handles booking, listing, lifecycle transitions, detail updates and deletion
of appointments. Every successful write pushes a change event to both
participants' live feeds.

Lifecycle:
    pending     -> confirmed, cancelled   (artist)
    confirmed   -> in_progress            (artist)
    confirmed   -> cancelled              (artist, client)
    in_progress -> completed              (artist)
completed and cancelled are terminal.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.appointment import schemas
from inkconnect.appointment.models import Appointment
from inkconnect.appointment.schemas import SortOrder
from inkconnect.artist.models import Artist
from inkconnect.artist.services import is_bookable
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import AppointmentStatus, UserRole
from inkconnect.database.session import commit_or_rollback
from inkconnect.messaging.manager import manager
from inkconnect.profile.services import ProfileService

logger = logging.getLogger(__name__)

# ------------------------------------------------------
# Lifecycle Edges and the Roles Allowed to Take Them
# ------------------------------------------------------
TRANSITIONS: dict[tuple[AppointmentStatus, AppointmentStatus], frozenset[UserRole]] = {
    (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED): frozenset({UserRole.ARTIST}),
    (AppointmentStatus.PENDING, AppointmentStatus.CANCELLED): frozenset({UserRole.ARTIST}),
    (AppointmentStatus.CONFIRMED, AppointmentStatus.IN_PROGRESS): frozenset({UserRole.ARTIST}),
    (AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED): frozenset(
        {UserRole.ARTIST, UserRole.CLIENT}
    ),
    (AppointmentStatus.IN_PROGRESS, AppointmentStatus.COMPLETED): frozenset({UserRole.ARTIST}),
}

UPCOMING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)

# Event names pushed to the live feed
APPOINTMENT_CREATED = "appointment.created"
APPOINTMENT_UPDATED = "appointment.updated"
APPOINTMENT_DELETED = "appointment.deleted"


def allowed_next_statuses(current: AppointmentStatus, role: UserRole) -> list[AppointmentStatus]:
    """Statuses `role` may move an appointment to from `current`."""
    return [to for (frm, to), roles in TRANSITIONS.items() if frm == current and role in roles]


def estimate_price(hourly_rate: Decimal | None, duration_hours: Decimal) -> Decimal | None:
    if hourly_rate is None:
        return None
    return (Decimal(hourly_rate) * Decimal(duration_hours)).quantize(Decimal("0.01"))


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_appointment_read(
    appointment: Appointment, viewer: RequestContext | None = None
) -> schemas.AppointmentRead:
    """Read model; `next_statuses` is filled for a participating viewer only."""
    data: dict[str, Any] = {
        column.key: getattr(appointment, column.key) for column in Appointment.__table__.columns
    }
    if appointment.artist is not None:
        data["artist_profile_id"] = appointment.artist.profile_id
        data["artist_name"] = appointment.artist.profile.full_name if appointment.artist.profile else None
    if appointment.client is not None:
        data["client_profile_id"] = appointment.client.profile_id
        data["client_name"] = appointment.client.profile.full_name if appointment.client.profile else None
    side = AppointmentService.participant_role(viewer, appointment) if viewer else None
    data["next_statuses"] = allowed_next_statuses(appointment.status, side) if side else []
    return schemas.AppointmentRead.model_validate(data)


class AppointmentService:
    """Appointment ledger and lifecycle."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------
    # Internal Helpers
    # ---------------------------------------------
    async def _get_or_404(self, appointment_id: UUID) -> Appointment:
        result = await self.db.execute(
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .execution_options(populate_existing=True)
        )
        appointment = result.scalar_one_or_none()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def participant_role(ctx: RequestContext, appointment: Appointment) -> UserRole | None:
        """The side of the appointment the caller is on, or None."""
        if ctx.is_artist and appointment.artist and appointment.artist.profile_id == ctx.profile_id:
            return UserRole.ARTIST
        if ctx.is_client and appointment.client and appointment.client.profile_id == ctx.profile_id:
            return UserRole.CLIENT
        return None

    def _ensure_can_view(self, ctx: RequestContext, appointment: Appointment) -> None:
        if ctx.is_admin or self.participant_role(ctx, appointment):
            return
        logger.warning(f"[APPOINTMENT] {ctx.profile_id} denied access to {appointment.id}")
        raise PermissionDeniedError("You are not a participant of this appointment")

    @staticmethod
    def _participant_profile_ids(appointment: Appointment) -> list[UUID]:
        return [
            p
            for p in (
                appointment.artist.profile_id if appointment.artist else None,
                appointment.client.profile_id if appointment.client else None,
            )
            if p is not None
        ]

    async def _publish(self, appointment: Appointment, event_type: str, data: Any) -> None:
        await manager.publish(self._participant_profile_ids(appointment), event_type, data)

    # ---------------------------------------------
    # Booking (Client)
    # ---------------------------------------------
    async def book(
        self, ctx: RequestContext, payload: schemas.AppointmentCreate
    ) -> schemas.AppointmentRead:
        if not ctx.is_client:
            raise PermissionDeniedError("Only clients can book appointments")

        client = await ProfileService(self.db).get_client_record(ctx)
        artist = await self.db.get(Artist, payload.artist_id)
        if not artist or artist.profile is None:
            raise NotFoundError("Artist not found")
        if not is_bookable(artist):
            logger.warning(f"[APPOINTMENT] Booking refused for non-bookable artist {artist.id}")
            raise ValidationError("This artist is not accepting bookings")
        if payload.appointment_date <= datetime.now(timezone.utc):
            raise ValidationError("Appointment date must be in the future")

        appointment = Appointment(
            client_id=client.id,
            artist_id=artist.id,
            appointment_date=payload.appointment_date,
            duration_hours=payload.duration_hours,
            description=(payload.description or "").strip() or None,
            status=AppointmentStatus.PENDING,
            estimated_price=estimate_price(artist.hourly_rate, payload.duration_hours),
        )
        self.db.add(appointment)
        await commit_or_rollback(self.db, "book appointment")

        appointment = await self._get_or_404(appointment.id)
        response = to_appointment_read(appointment, ctx)
        logger.info(
            f"[APPOINTMENT] Client {client.id} booked {appointment.id} with artist {artist.id}"
        )
        await self._publish(appointment, APPOINTMENT_CREATED, to_appointment_read(appointment))
        return response

    # ---------------------------------------------
    # Reads
    # ---------------------------------------------
    async def list_for_role(
        self,
        ctx: RequestContext,
        skip: int = 0,
        limit: int = 100,
        start: datetime | None = None,
        end: datetime | None = None,
        order: SortOrder = SortOrder.DESC,
        status: AppointmentStatus | None = None,
    ) -> PaginatedResponse[schemas.AppointmentRead]:
        """
        Client: own appointments. Artist: own appointments. Admin: all.
        `start`/`end` bound appointment_date inclusively; `order` sorts by it.
        """
        conditions = []
        if ctx.is_client:
            client = await ProfileService(self.db).get_client_record(ctx)
            conditions.append(Appointment.client_id == client.id)
        elif ctx.is_artist:
            artist = await ProfileService(self.db).get_artist_record(ctx)
            conditions.append(Appointment.artist_id == artist.id)
        elif not ctx.is_admin:
            raise PermissionDeniedError()

        start, end = _as_utc(start), _as_utc(end)
        if start is not None:
            conditions.append(Appointment.appointment_date >= start)
        if end is not None:
            conditions.append(Appointment.appointment_date <= end)
        if status is not None:
            conditions.append(Appointment.status == status)

        total = int(
            (
                await self.db.execute(
                    select(func.count()).select_from(Appointment).where(*conditions)
                )
            ).scalar_one()
        )
        sort_column = (
            Appointment.appointment_date.asc()
            if order == SortOrder.ASC
            else Appointment.appointment_date.desc()
        )
        result = await self.db.execute(
            select(Appointment).where(*conditions).order_by(sort_column).offset(skip).limit(limit)
        )
        items = [to_appointment_read(a, ctx) for a in result.scalars().all()]
        return PaginatedResponse[schemas.AppointmentRead].from_page(items, total, skip)

    async def get(self, ctx: RequestContext, appointment_id: UUID) -> schemas.AppointmentRead:
        appointment = await self._get_or_404(appointment_id)
        self._ensure_can_view(ctx, appointment)
        return to_appointment_read(appointment, ctx)

    async def get_model_for_participant(
        self, ctx: RequestContext, appointment_id: UUID
    ) -> Appointment:
        """Appointment row, after checking the caller may see it."""
        appointment = await self._get_or_404(appointment_id)
        self._ensure_can_view(ctx, appointment)
        return appointment

    async def upcoming_for_client(
        self, ctx: RequestContext, limit: int = 10
    ) -> list[schemas.AppointmentRead]:
        """Future pending or confirmed appointments of the calling client, soonest first."""
        client = await ProfileService(self.db).get_client_record(ctx)
        result = await self.db.execute(
            select(Appointment)
            .where(
                Appointment.client_id == client.id,
                Appointment.status.in_(UPCOMING_STATUSES),
                Appointment.appointment_date >= datetime.now(timezone.utc),
            )
            .order_by(Appointment.appointment_date.asc())
            .limit(limit)
        )
        return [to_appointment_read(a, ctx) for a in result.scalars().all()]

    async def count_upcoming(self, days: int = 30) -> int:
        now = datetime.now(timezone.utc)
        result = await self.db.execute(
            select(func.count())
            .select_from(Appointment)
            .where(
                Appointment.status.in_(UPCOMING_STATUSES),
                Appointment.appointment_date >= now,
                Appointment.appointment_date <= now + timedelta(days=days),
            )
        )
        return int(result.scalar_one())

    # ---------------------------------------------
    # Lifecycle
    # ---------------------------------------------
    async def transition(
        self, ctx: RequestContext, appointment_id: UUID, new_status: AppointmentStatus
    ) -> schemas.AppointmentRead:
        """
        Move an appointment along one lifecycle edge.

        Raises:
            PermissionDeniedError: caller is not a participant, or their role may not take the edge.
            InvalidTransitionError: the edge does not exist; the appointment is unchanged.
        """
        appointment = await self._get_or_404(appointment_id)
        side = self.participant_role(ctx, appointment)
        if side is None:
            logger.warning(
                f"[APPOINTMENT] Non-participant {ctx.profile_id} tried to move {appointment.id}"
            )
            raise PermissionDeniedError("You are not a participant of this appointment")

        current = appointment.status
        allowed_roles = TRANSITIONS.get((current, new_status))
        if allowed_roles is None:
            logger.warning(
                f"[APPOINTMENT] Rejected transition {current.value} -> {new_status.value} on {appointment.id}"
            )
            raise InvalidTransitionError(current.value, new_status.value)
        if side not in allowed_roles:
            raise PermissionDeniedError(
                f"A {side.value} cannot move an appointment from '{current.value}' to '{new_status.value}'"
            )

        appointment.status = new_status
        await commit_or_rollback(self.db, "update appointment status")
        appointment = await self._get_or_404(appointment.id)
        response = to_appointment_read(appointment, ctx)
        logger.info(
            f"[APPOINTMENT] {appointment.id} moved {current.value} -> {new_status.value} by {ctx.profile_id}"
        )
        await self._publish(appointment, APPOINTMENT_UPDATED, to_appointment_read(appointment))
        return response

    async def update_details(
        self, ctx: RequestContext, appointment_id: UUID, payload: schemas.AppointmentDetailsUpdate
    ) -> schemas.AppointmentRead:
        """Notes and payment tracking; owning artist or admin."""
        appointment = await self._get_or_404(appointment_id)
        if not ctx.is_admin and self.participant_role(ctx, appointment) != UserRole.ARTIST:
            raise PermissionDeniedError("Only the appointment's artist or an admin can edit details")

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(appointment, field, value)
        await commit_or_rollback(self.db, "update appointment details")
        appointment = await self._get_or_404(appointment.id)
        response = to_appointment_read(appointment, ctx)
        logger.info(f"[APPOINTMENT] Details updated on {appointment.id} by {ctx.profile_id}")
        await self._publish(appointment, APPOINTMENT_UPDATED, to_appointment_read(appointment))
        return response

    async def delete(self, ctx: RequestContext, appointment_id: UUID) -> None:
        """Allowed only while pending, and only for the owning client or an admin."""
        appointment = await self._get_or_404(appointment_id)
        is_owner = self.participant_role(ctx, appointment) == UserRole.CLIENT
        if appointment.status != AppointmentStatus.PENDING or not (ctx.is_admin or is_owner):
            logger.warning(
                f"[APPOINTMENT] Delete of {appointment.id} ({appointment.status.value}) denied for {ctx.profile_id}"
            )
            raise PermissionDeniedError("Only pending appointments can be deleted by their client or an admin")

        recipients = self._participant_profile_ids(appointment)
        await self.db.delete(appointment)
        await commit_or_rollback(self.db, "delete appointment")
        logger.info(f"[APPOINTMENT] Deleted {appointment_id} by {ctx.profile_id}")
        await manager.publish(recipients, APPOINTMENT_DELETED, {"id": str(appointment_id)})
