"""
inkconnect/profile/services.py

Profile Service Layer
- Self-service reads and updates of the caller's profile
- Profile picture upload to object storage
- Role record resolution: maps a profile to its Artist or Client record
"""

import logging
import uuid
from typing import cast
from uuid import UUID

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.artist.models import Artist
from inkconnect.client.models import Client
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import NotFoundError, PermissionDeniedError, UpstreamError
from inkconnect.core.upload import (
    ALLOWED_IMAGE_TYPES,
    compress_image,
    delete_from_s3,
    read_image_upload,
    upload_bytes_to_s3,
)
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import commit_or_rollback
from inkconnect.profile import schemas

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile self-service and role record lookups."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------
    # Internal Helpers
    # ---------------------------------------------
    async def get_profile_or_404(self, profile_id: UUID) -> Profile:
        profile = await self.db.get(Profile, profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    # ---------------------------------------------
    # Role Record Resolution
    # ---------------------------------------------
    async def resolve_role_record(
        self, profile: Profile | RequestContext, role: UserRole
    ) -> Artist | Client:
        """
        Return the role record for `profile`.

        - artist: must already exist, otherwise NotFoundError
        - client: created with empty optional fields on first access
        - a profile holding a different role: PermissionDeniedError
        """
        profile_id = profile.profile_id if isinstance(profile, RequestContext) else profile.id
        if profile.role != role:
            logger.warning(
                f"[PROFILE] Role mismatch for {profile_id}: has {profile.role}, needs {role}"
            )
            raise PermissionDeniedError(f"This action requires the {role.value} role")

        if role == UserRole.ARTIST:
            result = await self.db.execute(select(Artist).where(Artist.profile_id == profile_id))
            artist = result.scalar_one_or_none()
            if not artist:
                logger.error(f"[PROFILE] Artist profile {profile_id} has no artist record")
                raise NotFoundError("Artist record not found for this profile")
            return artist

        if role == UserRole.CLIENT:
            result = await self.db.execute(select(Client).where(Client.profile_id == profile_id))
            client = result.scalar_one_or_none()
            if not client:
                client = Client(profile_id=profile_id)
                self.db.add(client)
                await commit_or_rollback(self.db, "create client record")
                await self.db.refresh(client)
                logger.info(f"[PROFILE] Created client record for {profile_id}")
            return client

        raise PermissionDeniedError(f"The {role.value} role has no role record")

    async def get_artist_record(self, ctx: RequestContext) -> Artist:
        return cast(Artist, await self.resolve_role_record(ctx, UserRole.ARTIST))

    async def get_client_record(self, ctx: RequestContext) -> Client:
        return cast(Client, await self.resolve_role_record(ctx, UserRole.CLIENT))

    # ---------------------------------------------
    # Self-Service
    # ---------------------------------------------
    async def get_me(self, ctx: RequestContext) -> schemas.ProfileRead:
        profile = await self.get_profile_or_404(ctx.profile_id)
        return schemas.ProfileRead.model_validate(profile)

    async def update_me(
        self, ctx: RequestContext, payload: schemas.ProfileUpdate
    ) -> schemas.ProfileRead:
        profile = await self.get_profile_or_404(ctx.profile_id)
        profile.full_name = payload.full_name
        await commit_or_rollback(self.db, "update profile")
        await self.db.refresh(profile)
        logger.info(f"[PROFILE] Updated profile {profile.id}")
        return schemas.ProfileRead.model_validate(profile)

    async def update_profile_image(
        self, ctx: RequestContext, file: UploadFile
    ) -> schemas.ProfileRead:
        profile = await self.get_profile_or_404(ctx.profile_id)
        data, mime = await read_image_upload(file)
        data = await run_in_threadpool(compress_image, data, mime)

        key = f"profile_pictures/{profile.id}-{uuid.uuid4().hex}.{ALLOWED_IMAGE_TYPES[mime]}"
        url = await run_in_threadpool(upload_bytes_to_s3, data, key, mime)

        previous = profile.profile_image
        profile.profile_image = url
        try:
            await commit_or_rollback(self.db, "update profile picture")
        except UpstreamError:
            await run_in_threadpool(delete_from_s3, url)
            raise
        if previous:
            await run_in_threadpool(delete_from_s3, previous)
        await self.db.refresh(profile)
        logger.info(f"[PROFILE] Updated profile picture for {profile.id}")
        return schemas.ProfileRead.model_validate(profile)
