"""
inkconnect/artist/routes.py

Artist API Routes
- Public directory and artist detail (no authentication)
- Artist self-service (artist role)
- Admin edits of any artist (manager/owner)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from inkconnect.artist import schemas
from inkconnect.artist.services import ArtistService
from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import AdminDep, DBDep, PaginationParams, require_artist
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/artists", tags=["Artists"])

ArtistDep = Annotated[RequestContext, Depends(require_artist)]


# ---------------------------------------------------
# Public Endpoints
# ---------------------------------------------------
@router.get(
    "",
    response_model=PaginatedResponse[schemas.ArtistRead],
    status_code=status.HTTP_200_OK,
    summary="Artist Directory",
    description="Lists artists currently accepting bookings, optionally filtered by specialization.",
)
@limiter.limit("60/minute")
async def list_artists(
    request: Request,
    db: DBDep,
    pagination: PaginationParams = Depends(),
    specialization: str | None = Query(None, description="Style the artist must specialize in"),
) -> PaginatedResponse[schemas.ArtistRead]:
    return await ArtistService(db).list_directory(specialization, pagination.skip, pagination.limit)


# ---------------------------------------------------
# Artist Self-Service
# ---------------------------------------------------
@router.get(
    "/me",
    response_model=schemas.ArtistRead,
    status_code=status.HTTP_200_OK,
    summary="Get My Artist Record",
)
async def get_my_artist(db: DBDep, ctx: ArtistDep) -> schemas.ArtistRead:
    return await ArtistService(db).get_me(ctx)


@router.patch(
    "/me",
    response_model=schemas.ArtistRead,
    status_code=status.HTTP_200_OK,
    summary="Update My Artist Record",
)
@limiter.limit("10/minute")
async def update_my_artist(
    request: Request, payload: schemas.ArtistUpdate, db: DBDep, ctx: ArtistDep
) -> schemas.ArtistRead:
    return await ArtistService(db).update_me(ctx, payload)


@router.get(
    "/{artist_id}",
    response_model=schemas.ArtistRead,
    status_code=status.HTTP_200_OK,
    summary="Get Artist",
)
async def get_artist(artist_id: UUID, db: DBDep) -> schemas.ArtistRead:
    return await ArtistService(db).get_public_artist(artist_id)


# ---------------------------------------------------
# Admin
# ---------------------------------------------------
@router.patch(
    "/{artist_id}",
    response_model=schemas.ArtistRead,
    status_code=status.HTTP_200_OK,
    summary="Update Artist (Admin)",
)
async def admin_update_artist(
    artist_id: UUID, payload: schemas.ArtistUpdate, db: DBDep, ctx: AdminDep
) -> schemas.ArtistRead:
    return await ArtistService(db).admin_update(artist_id, payload)
