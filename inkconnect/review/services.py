"""
inkconnect/review/services.py

Review Service Layer
- Clients review their completed appointments, once per appointment
- Public reviews of an artist, newest first
- Average rating summary per artist
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.appointment.models import Appointment
from inkconnect.artist.models import Artist
from inkconnect.client.models import Client
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import AppointmentStatus
from inkconnect.database.session import commit_or_rollback
from inkconnect.review import schemas
from inkconnect.review.models import Review

logger = logging.getLogger(__name__)


async def submit_review(
    db: AsyncSession, ctx: RequestContext, payload: schemas.ReviewCreate
) -> schemas.ReviewRead:
    """
    Record the calling client's review of a completed appointment.

    Raises:
        NotFoundError: unknown appointment.
        PermissionDeniedError: caller is not the appointment's client.
        ValidationError: appointment not completed, or already reviewed.
    """
    appointment = await db.get(Appointment, payload.appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")
    if not ctx.is_client or appointment.client is None or appointment.client.profile_id != ctx.profile_id:
        raise PermissionDeniedError("Only the appointment's client can review it")
    if appointment.status != AppointmentStatus.COMPLETED:
        raise ValidationError("Only completed appointments can be reviewed")

    existing = await db.execute(select(Review.id).where(Review.appointment_id == appointment.id))
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("This appointment has already been reviewed")

    review = Review(
        appointment_id=appointment.id,
        artist_id=appointment.artist_id,
        client_id=appointment.client_id,
        rating=payload.rating,
        review_text=(payload.review_text or "").strip() or None,
        is_public=payload.is_public,
    )
    db.add(review)
    await commit_or_rollback(db, "submit review")
    await db.refresh(review)
    logger.info(f"[REVIEW] {review.id} ({review.rating}/5) for artist {review.artist_id}")
    return _to_read(review, appointment.client.profile.full_name if appointment.client.profile else None)


def _to_read(review: Review, client_name: str | None) -> schemas.ReviewRead:
    read = schemas.ReviewRead.model_validate(review)
    read.client_name = client_name
    return read


async def list_artist_reviews(
    db: AsyncSession, artist_id: UUID, skip: int = 0, limit: int = 100
) -> PaginatedResponse[schemas.ReviewRead]:
    """Public reviews of an artist, newest first."""
    if not await db.get(Artist, artist_id):
        raise NotFoundError("Artist not found")

    conditions = (Review.artist_id == artist_id, Review.is_public.is_(True))
    total = int(
        (await db.execute(select(func.count()).select_from(Review).where(*conditions))).scalar_one()
    )
    result = await db.execute(
        select(Review, Client)
        .join(Client, Client.id == Review.client_id)
        .where(*conditions)
        .order_by(Review.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    items = [
        _to_read(review, client.profile.full_name if client.profile else None)
        for review, client in result.all()
    ]
    return PaginatedResponse[schemas.ReviewRead].from_page(items, total, skip)


async def get_review_summary(db: AsyncSession, artist_id: UUID) -> schemas.ReviewSummary:
    """Average rating and number of reviews for an artist."""
    if not await db.get(Artist, artist_id):
        raise NotFoundError("Artist not found")
    result = await db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.artist_id == artist_id)
    )
    average, count = result.one()
    return schemas.ReviewSummary(
        artist_id=artist_id,
        average_rating=round(float(average), 2) if average is not None else None,
        total_reviews=int(count),
    )
