"""
inkconnect/artwork/services.py

Artwork Service Layer

Handles an artist's portfolio and the artwork log shared with clients:
- Image upload (validated, compressed, stored in S3) with metadata
- Visibility toggle, direct status set, metadata edits and deletion
- Listing with visibility rules, style filter and text search
- Portfolio statistics
"""

import logging
import uuid
from uuid import UUID

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.appointment.models import Appointment
from inkconnect.artist.models import Artist
from inkconnect.artwork import schemas
from inkconnect.artwork.models import Artwork
from inkconnect.client.models import Client
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
    ValidationError,
)
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.core.upload import (
    ALLOWED_IMAGE_TYPES,
    compress_image,
    delete_from_s3,
    read_image_upload,
    upload_bytes_to_s3,
)
from inkconnect.database.enums import ArtworkStatus
from inkconnect.database.session import commit_or_rollback
from inkconnect.profile.services import ProfileService

logger = logging.getLogger(__name__)


def artwork_object_key(artist_id: UUID, mime: str) -> str:
    return f"artwork/{artist_id}-{uuid.uuid4().hex}.{ALLOWED_IMAGE_TYPES[mime]}"


class ArtworkService:
    """Portfolio and artwork log operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------
    # Internal Helpers
    # ---------------------------------------------
    async def _get_or_404(self, artwork_id: UUID) -> Artwork:
        artwork = await self.db.get(Artwork, artwork_id)
        if not artwork:
            raise NotFoundError("Artwork not found")
        return artwork

    async def _owns_artist_record(self, ctx: RequestContext, artist_id: UUID) -> bool:
        if not ctx.is_artist:
            return False
        artist = await self.db.get(Artist, artist_id)
        return bool(artist and artist.profile_id == ctx.profile_id)

    async def _get_for_edit(self, ctx: RequestContext, artwork_id: UUID) -> Artwork:
        """Artwork the caller may modify: owning artist or admin."""
        artwork = await self._get_or_404(artwork_id)
        if ctx.is_admin or await self._owns_artist_record(ctx, artwork.artist_id):
            return artwork
        logger.warning(f"[ARTWORK] {ctx.profile_id} denied edit of {artwork.id}")
        raise PermissionDeniedError("Only the owning artist or an admin can change this artwork")

    async def _check_links(
        self, artist: Artist, client_id: UUID | None, appointment_id: UUID | None
    ) -> None:
        if client_id is not None and not await self.db.get(Client, client_id):
            raise NotFoundError("Client not found")
        if appointment_id is not None:
            appointment = await self.db.get(Appointment, appointment_id)
            if not appointment:
                raise NotFoundError("Appointment not found")
            if appointment.artist_id != artist.id:
                raise PermissionDeniedError("The appointment belongs to another artist")

    async def _save(self, artwork: Artwork, action: str) -> schemas.ArtworkRead:
        await commit_or_rollback(self.db, action)
        await self.db.refresh(artwork)
        return schemas.ArtworkRead.model_validate(artwork)

    # ---------------------------------------------
    # Upload
    # ---------------------------------------------
    async def upload(
        self, ctx: RequestContext, file: UploadFile, meta: schemas.ArtworkUploadMeta
    ) -> schemas.ArtworkRead:
        """
        Validate, compress and store an image, then record it.
        Nothing is stored when the title is blank or the file is rejected.
        """
        artist = await ProfileService(self.db).get_artist_record(ctx)

        title = meta.title.strip()
        if not title:
            raise ValidationError("Title is required")
        await self._check_links(artist, meta.client_id, meta.appointment_id)

        data, mime = await read_image_upload(file)
        data = await run_in_threadpool(compress_image, data, mime)
        image_url = await run_in_threadpool(
            upload_bytes_to_s3, data, artwork_object_key(artist.id, mime), mime
        )

        artwork = Artwork(
            artist_id=artist.id,
            client_id=meta.client_id,
            appointment_id=meta.appointment_id,
            title=title,
            description=(meta.description or "").strip() or None,
            image_url=image_url,
            style_tags=meta.style_tags,
            is_public=meta.is_public,
            is_portfolio_piece=meta.is_portfolio_piece,
            status=meta.status,
            completion_date=meta.completion_date,
        )
        self.db.add(artwork)
        try:
            response = await self._save(artwork, "save artwork")
        except UpstreamError:
            await run_in_threadpool(delete_from_s3, image_url)
            raise
        logger.info(f"[ARTWORK] Artist {artist.id} uploaded {artwork.id} ({len(data)} bytes)")
        return response

    # ---------------------------------------------
    # Edits
    # ---------------------------------------------
    async def toggle_visibility(self, ctx: RequestContext, artwork_id: UUID) -> schemas.ArtworkRead:
        artwork = await self._get_for_edit(ctx, artwork_id)
        artwork.is_public = not artwork.is_public
        response = await self._save(artwork, "change artwork visibility")
        logger.info(f"[ARTWORK] {artwork.id} is_public={artwork.is_public}")
        return response

    async def set_status(
        self, ctx: RequestContext, artwork_id: UUID, status: ArtworkStatus
    ) -> schemas.ArtworkRead:
        artwork = await self._get_for_edit(ctx, artwork_id)
        artwork.status = status
        return await self._save(artwork, "change artwork status")

    async def update(
        self, ctx: RequestContext, artwork_id: UUID, payload: schemas.ArtworkUpdate
    ) -> schemas.ArtworkRead:
        artwork = await self._get_for_edit(ctx, artwork_id)
        updates = payload.model_dump(exclude_unset=True)
        if updates.get("client_id") is not None and not await self.db.get(
            Client, updates["client_id"]
        ):
            raise NotFoundError("Client not found")
        for field, value in updates.items():
            if field == "title" and value is None:
                continue
            setattr(artwork, field, value)
        return await self._save(artwork, "update artwork")

    async def delete(self, ctx: RequestContext, artwork_id: UUID) -> None:
        artwork = await self._get_for_edit(ctx, artwork_id)
        image_url = artwork.image_url
        await self.db.delete(artwork)
        await commit_or_rollback(self.db, "delete artwork")
        await run_in_threadpool(delete_from_s3, image_url)
        logger.info(f"[ARTWORK] Deleted {artwork_id} by {ctx.profile_id}")

    # ---------------------------------------------
    # Reads
    # ---------------------------------------------
    async def list_for_artist(
        self,
        ctx: RequestContext | None,
        artist_id: UUID,
        style: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> PaginatedResponse[schemas.ArtworkRead]:
        """
        Pieces of one artist, newest first. The owner and admins see everything;
        everyone else only public pieces. `style` matches a tag, `search` is a
        case-insensitive substring of title or description.
        """
        if not await self.db.get(Artist, artist_id):
            raise NotFoundError("Artist not found")

        stmt = select(Artwork).where(Artwork.artist_id == artist_id)
        sees_private = ctx is not None and (
            ctx.is_admin or await self._owns_artist_record(ctx, artist_id)
        )
        if not sees_private:
            stmt = stmt.where(Artwork.is_public.is_(True))

        result = await self.db.execute(stmt.order_by(Artwork.created_at.desc()))
        artworks = list(result.scalars().all())

        if style:
            wanted = style.strip().lower()
            artworks = [a for a in artworks if any(t.lower() == wanted for t in a.style_tags or [])]
        if search:
            needle = search.strip().lower()
            artworks = [
                a
                for a in artworks
                if needle in a.title.lower() or needle in (a.description or "").lower()
            ]

        page = artworks[skip : skip + limit]
        return PaginatedResponse[schemas.ArtworkRead].from_page(
            [schemas.ArtworkRead.model_validate(a) for a in page], len(artworks), skip
        )

    async def list_for_client(self, ctx: RequestContext) -> list[schemas.ArtworkRead]:
        """The calling client's artwork log."""
        client = await ProfileService(self.db).get_client_record(ctx)
        result = await self.db.execute(
            select(Artwork).where(Artwork.client_id == client.id).order_by(Artwork.created_at.desc())
        )
        return [schemas.ArtworkRead.model_validate(a) for a in result.scalars().all()]

    async def stats(self, ctx: RequestContext) -> schemas.PortfolioStats:
        """Counts for the calling artist's portfolio."""
        artist = await ProfileService(self.db).get_artist_record(ctx)
        result = await self.db.execute(select(Artwork).where(Artwork.artist_id == artist.id))
        artworks = list(result.scalars().all())
        public = sum(1 for a in artworks if a.is_public)
        return schemas.PortfolioStats(
            total=len(artworks),
            public=public,
            private=len(artworks) - public,
            portfolio_pieces=sum(1 for a in artworks if a.is_portfolio_piece),
        )
