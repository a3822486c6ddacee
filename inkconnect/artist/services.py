"""
inkconnect/artist/services.py

Artist Service Layer
Handles the public artist directory, artist self-service and admin edits.
Directory reads are cached in Redis and invalidated on every artist write.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.artist import schemas
from inkconnect.artist.models import Artist
from inkconnect.core.cache import (
    _cache_key,
    _paginated_cache_key,
    cache_get,
    cache_set,
    invalidate_pattern,
)
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import NotFoundError
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import commit_or_rollback
from inkconnect.profile.services import ProfileService

logger = logging.getLogger(__name__)

# ------------------------
# --- Cache Namespaces ---
# ------------------------
ARTIST_DIRECTORY_NS = "artist:directory"
ARTIST_DETAIL_NS = "artist:detail"


def bookable_conditions() -> tuple[Any, ...]:
    """Artist rows that take bookings: available, and the profile is an active artist."""
    return (
        Artist.is_available.is_(True),
        Profile.role == UserRole.ARTIST,
        Profile.is_active.is_(True),
    )


def is_bookable(artist: Artist) -> bool:
    profile = artist.profile
    return bool(
        artist.is_available
        and profile is not None
        and profile.role == UserRole.ARTIST
        and profile.is_active
    )


def to_artist_read(artist: Artist) -> schemas.ArtistRead:
    """Merge the artist record with its profile's public fields."""
    data: dict[str, Any] = {
        column.key: getattr(artist, column.key) for column in Artist.__table__.columns
    }
    data["full_name"] = artist.profile.full_name if artist.profile else None
    data["profile_image"] = artist.profile.profile_image if artist.profile else None
    return schemas.ArtistRead.model_validate(data)


class ArtistService:
    """Artist directory, self-service and admin operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # --- Cache Invalidation ---
    async def _invalidate_artist_caches(self, artist_id: UUID) -> None:
        await invalidate_pattern(f"{ARTIST_DIRECTORY_NS}:*")
        await invalidate_pattern(f"{ARTIST_DETAIL_NS}:{artist_id}")

    # --- Internal Helpers ---
    async def get_artist_or_404(self, artist_id: UUID) -> Artist:
        artist = await self.db.get(Artist, artist_id)
        if not artist:
            raise NotFoundError("Artist not found")
        return artist

    def _apply_update(self, artist: Artist, payload: schemas.ArtistUpdate) -> None:
        for field, value in payload.model_dump(exclude_unset=True, mode="json").items():
            if field == "hourly_rate":
                value = payload.hourly_rate
            setattr(artist, field, value)

    # ---------------------------------------------
    # Public Directory
    # ---------------------------------------------
    async def list_directory(
        self, specialization: str | None, skip: int, limit: int
    ) -> PaginatedResponse[schemas.ArtistRead]:
        """Available artists, optionally filtered to one specialization (case-insensitive)."""
        spec_key = (specialization or "all").strip().lower()
        cache_key = _paginated_cache_key(ARTIST_DIRECTORY_NS, spec_key, skip, limit)
        cached = await cache_get(cache_key)
        if cached:
            logger.debug(f"[CACHE] Hit for {cache_key}")
            return PaginatedResponse[schemas.ArtistRead].model_validate_json(cached)

        result = await self.db.execute(
            select(Artist)
            .join(Profile, Artist.profile_id == Profile.id)
            .where(*bookable_conditions())
            .order_by(Artist.created_at)
        )
        artists = list(result.scalars().all())
        if specialization:
            wanted = specialization.strip().lower()
            artists = [
                a for a in artists if any(s.lower() == wanted for s in (a.specializations or []))
            ]

        page = artists[skip : skip + limit]
        response = PaginatedResponse[schemas.ArtistRead].from_page(
            [to_artist_read(a) for a in page], len(artists), skip
        )
        await cache_set(cache_key, response.model_dump_json())
        return response

    async def get_public_artist(self, artist_id: UUID) -> schemas.ArtistRead:
        cache_key = _cache_key(ARTIST_DETAIL_NS, artist_id)
        cached = await cache_get(cache_key)
        if cached:
            return schemas.ArtistRead.model_validate_json(cached)

        response = to_artist_read(await self.get_artist_or_404(artist_id))
        await cache_set(cache_key, response.model_dump_json())
        return response

    async def count_artists(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Artist))
        return int(result.scalar_one())

    # ---------------------------------------------
    # Artist Self-Service
    # ---------------------------------------------
    async def get_me(self, ctx: RequestContext) -> schemas.ArtistRead:
        artist = await ProfileService(self.db).get_artist_record(ctx)
        return to_artist_read(artist)

    async def update_me(
        self, ctx: RequestContext, payload: schemas.ArtistUpdate
    ) -> schemas.ArtistRead:
        artist = await ProfileService(self.db).get_artist_record(ctx)
        return await self._save_update(artist, payload)

    # ---------------------------------------------
    # Admin
    # ---------------------------------------------
    async def admin_update(
        self, artist_id: UUID, payload: schemas.ArtistUpdate
    ) -> schemas.ArtistRead:
        artist = await self.get_artist_or_404(artist_id)
        return await self._save_update(artist, payload)

    async def _save_update(
        self, artist: Artist, payload: schemas.ArtistUpdate
    ) -> schemas.ArtistRead:
        self._apply_update(artist, payload)
        await commit_or_rollback(self.db, "update artist")
        await self.db.refresh(artist)
        await self._invalidate_artist_caches(artist.id)
        logger.info(f"[ARTIST] Updated artist {artist.id}")
        return to_artist_read(artist)
