"""
inkconnect/review/routes.py

Review API Routes
- Submit a review (client)
- Public reviews and rating summary of an artist
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import DBDep, PaginationParams, require_client
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.review import schemas, services

router = APIRouter(prefix="/reviews", tags=["Reviews"])

ClientDep = Annotated[RequestContext, Depends(require_client)]


@router.post(
    "",
    response_model=schemas.ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Review",
    description="Clients review their own completed appointments, once per appointment.",
)
@limiter.limit("5/minute")
async def submit_review(
    request: Request, payload: schemas.ReviewCreate, db: DBDep, ctx: ClientDep
) -> schemas.ReviewRead:
    return await services.submit_review(db, ctx, payload)


@router.get(
    "/artist/{artist_id}",
    response_model=PaginatedResponse[schemas.ReviewRead],
    status_code=status.HTTP_200_OK,
    summary="List Artist Reviews",
)
async def list_artist_reviews(
    artist_id: UUID, db: DBDep, pagination: PaginationParams = Depends()
) -> PaginatedResponse[schemas.ReviewRead]:
    return await services.list_artist_reviews(db, artist_id, pagination.skip, pagination.limit)


@router.get(
    "/artist/{artist_id}/summary",
    response_model=schemas.ReviewSummary,
    status_code=status.HTTP_200_OK,
    summary="Artist Rating Summary",
)
async def get_review_summary(artist_id: UUID, db: DBDep) -> schemas.ReviewSummary:
    return await services.get_review_summary(db, artist_id)
