"""
inkconnect/admin/services.py

Admin Service Layer
- Creates accounts of any role together with their role record
- Assigns roles (provisioning the new role record when missing)
- Activates / deactivates accounts
- Lists and inspects profiles
- Studio dashboard totals
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.admin import schemas
from inkconnect.appointment.services import AppointmentService
from inkconnect.artist.models import Artist
from inkconnect.artist.services import ArtistService
from inkconnect.auth.services import create_account, ensure_role_record
from inkconnect.client.services import ClientService
from inkconnect.core.cache import invalidate_pattern
from inkconnect.core.context import RequestContext
from inkconnect.core.email import send_account_created_email
from inkconnect.core.exceptions import NotFoundError, UpstreamError, ValidationError
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import commit_or_rollback
from inkconnect.messaging.services import total_unread
from inkconnect.profile.schemas import ProfileRead

logger = logging.getLogger(__name__)


class AdminService:
    """Operations available to managers and owners."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_profile_or_404(self, profile_id: UUID) -> Profile:
        profile = await self.db.get(Profile, profile_id)
        if not profile:
            raise NotFoundError("User not found")
        return profile

    # ---------------------------------------------
    # Account Management
    # ---------------------------------------------
    async def create_user(
        self, ctx: RequestContext, payload: schemas.AdminCreateUser
    ) -> schemas.AdminCreateUserResponse:
        profile = await create_account(
            self.db, payload.email, payload.password, payload.full_name, payload.role
        )
        logger.info(
            f"[ADMIN] {ctx.profile_id} created {payload.role.value} account {profile.id}"
        )
        if profile.role == UserRole.ARTIST:
            await invalidate_pattern("artist:*")

        try:
            await send_account_created_email(profile.email, profile.full_name or "", profile.role.value)
        except UpstreamError as e:
            # account stays created when the notification fails
            logger.warning(f"[ADMIN] Account created but notification failed for {profile.id}: {e.message}")

        return schemas.AdminCreateUserResponse(user=ProfileRead.model_validate(profile))

    async def _retire_artist_record(self, profile_id: UUID) -> None:
        """Take a former artist out of the directory and booking. The record and its history stay."""
        result = await self.db.execute(select(Artist).where(Artist.profile_id == profile_id))
        artist = result.scalar_one_or_none()
        if artist is not None and artist.is_available:
            artist.is_available = False
            logger.info(f"[ADMIN] Retired artist record {artist.id} of {profile_id}")

    async def set_role(self, ctx: RequestContext, profile_id: UUID, role: UserRole) -> None:
        profile = await self._get_profile_or_404(profile_id)
        previous = profile.role
        profile.role = role
        await ensure_role_record(self.db, profile)
        if previous == UserRole.ARTIST and role != UserRole.ARTIST:
            await self._retire_artist_record(profile.id)
        await commit_or_rollback(self.db, "assign role")
        if UserRole.ARTIST in (previous, role):
            await invalidate_pattern("artist:*")
        logger.info(
            f"[ADMIN] {ctx.profile_id} changed role of {profile.id}: {previous.value} -> {role.value}"
        )

    async def set_active(
        self, ctx: RequestContext, profile_id: UUID, is_active: bool
    ) -> schemas.ActiveStatusResponse:
        if profile_id == ctx.profile_id and not is_active:
            raise ValidationError("You cannot deactivate your own account")
        profile = await self._get_profile_or_404(profile_id)
        profile.is_active = is_active
        await commit_or_rollback(self.db, "change account status")
        if profile.role == UserRole.ARTIST:
            await invalidate_pattern("artist:*")
        logger.info(f"[ADMIN] {ctx.profile_id} set is_active={is_active} on {profile.id}")
        return schemas.ActiveStatusResponse(profile_id=profile.id, is_active=is_active)

    # ---------------------------------------------
    # Listing
    # ---------------------------------------------
    async def list_users(
        self,
        role: UserRole | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> PaginatedResponse[ProfileRead]:
        conditions = []
        if role is not None:
            conditions.append(Profile.role == role)
        if search:
            pattern = f"%{search.strip().lower()}%"
            conditions.append(
                or_(
                    func.lower(Profile.email).like(pattern),
                    func.lower(Profile.full_name).like(pattern),
                )
            )

        total = int(
            (
                await self.db.execute(select(func.count()).select_from(Profile).where(*conditions))
            ).scalar_one()
        )
        result = await self.db.execute(
            select(Profile)
            .where(*conditions)
            .order_by(Profile.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        items = [ProfileRead.model_validate(p) for p in result.scalars().all()]
        return PaginatedResponse[ProfileRead].from_page(items, total, skip)

    async def get_user(self, profile_id: UUID) -> ProfileRead:
        return ProfileRead.model_validate(await self._get_profile_or_404(profile_id))

    # ---------------------------------------------
    # Dashboard
    # ---------------------------------------------
    async def dashboard(self) -> schemas.DashboardStats:
        return schemas.DashboardStats(
            total_artists=await ArtistService(self.db).count_artists(),
            total_clients=await ClientService(self.db).count_clients(),
            upcoming_appointments=await AppointmentService(self.db).count_upcoming(days=30),
            unread_messages=await total_unread(self.db),
        )
