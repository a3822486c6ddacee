"""
inkconnect/artwork/routes.py

Artwork API Routes
- Upload (artist, multipart image + form metadata)
- Public / owner listing of an artist's pieces
- Client artwork log
- Visibility, status, edit and delete (owning artist or admin)
- Portfolio statistics (artist)
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status

from inkconnect.artwork import schemas
from inkconnect.artwork.services import ArtworkService
from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import (
    ContextDep,
    DBDep,
    PaginationParams,
    get_optional_context,
    require_artist,
    require_client,
)
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import ArtworkStatus

router = APIRouter(prefix="/artworks", tags=["Artwork"])

ArtistDep = Annotated[RequestContext, Depends(require_artist)]
ClientDep = Annotated[RequestContext, Depends(require_client)]
OptionalContextDep = Annotated[RequestContext | None, Depends(get_optional_context)]


@router.post(
    "",
    response_model=schemas.ArtworkRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Artwork",
    description="JPEG, PNG, GIF or WEBP up to 10 MB. Images are compressed before storage.",
)
@limiter.limit("10/minute")
async def upload_artwork(
    request: Request,
    db: DBDep,
    ctx: ArtistDep,
    file: UploadFile = File(...),
    title: str = Form(""),
    description: str | None = Form(None),
    style_tags: list[str] | None = Form(None),
    is_public: bool = Form(True),
    is_portfolio_piece: bool = Form(True),
    artwork_status: ArtworkStatus = Form(ArtworkStatus.COMPLETED, alias="status"),
    client_id: UUID | None = Form(None),
    appointment_id: UUID | None = Form(None),
    completion_date: datetime | None = Form(None),
) -> schemas.ArtworkRead:
    meta = schemas.ArtworkUploadMeta(
        title=title,
        description=description,
        style_tags=style_tags,
        is_public=is_public,
        is_portfolio_piece=is_portfolio_piece,
        status=artwork_status,
        client_id=client_id,
        appointment_id=appointment_id,
        completion_date=completion_date,
    )
    return await ArtworkService(db).upload(ctx, file, meta)


@router.get(
    "/artist/{artist_id}",
    response_model=PaginatedResponse[schemas.ArtworkRead],
    status_code=status.HTTP_200_OK,
    summary="List Artist's Artwork",
    description="Public pieces for everyone; the owning artist and admins also see private ones.",
)
async def list_artist_artwork(
    artist_id: UUID,
    db: DBDep,
    ctx: OptionalContextDep,
    pagination: PaginationParams = Depends(),
    style: str | None = Query(None, description="Style tag to match"),
    search: str | None = Query(None, description="Text to find in title or description"),
) -> PaginatedResponse[schemas.ArtworkRead]:
    return await ArtworkService(db).list_for_artist(
        ctx, artist_id, style=style, search=search, skip=pagination.skip, limit=pagination.limit
    )


@router.get(
    "/mine",
    response_model=list[schemas.ArtworkRead],
    status_code=status.HTTP_200_OK,
    summary="My Artwork Log (Client)",
)
async def list_my_artwork(db: DBDep, ctx: ClientDep) -> list[schemas.ArtworkRead]:
    return await ArtworkService(db).list_for_client(ctx)


@router.get(
    "/stats",
    response_model=schemas.PortfolioStats,
    status_code=status.HTTP_200_OK,
    summary="Portfolio Statistics (Artist)",
)
async def portfolio_stats(db: DBDep, ctx: ArtistDep) -> schemas.PortfolioStats:
    return await ArtworkService(db).stats(ctx)


@router.post(
    "/{artwork_id}/visibility",
    response_model=schemas.ArtworkRead,
    status_code=status.HTTP_200_OK,
    summary="Toggle Artwork Visibility",
)
async def toggle_visibility(artwork_id: UUID, db: DBDep, ctx: ContextDep) -> schemas.ArtworkRead:
    return await ArtworkService(db).toggle_visibility(ctx, artwork_id)


@router.patch(
    "/{artwork_id}/status",
    response_model=schemas.ArtworkRead,
    status_code=status.HTTP_200_OK,
    summary="Set Artwork Status",
)
async def set_status(
    artwork_id: UUID, payload: schemas.ArtworkStatusUpdate, db: DBDep, ctx: ContextDep
) -> schemas.ArtworkRead:
    return await ArtworkService(db).set_status(ctx, artwork_id, payload.status)


@router.patch(
    "/{artwork_id}",
    response_model=schemas.ArtworkRead,
    status_code=status.HTTP_200_OK,
    summary="Edit Artwork",
)
async def update_artwork(
    artwork_id: UUID, payload: schemas.ArtworkUpdate, db: DBDep, ctx: ContextDep
) -> schemas.ArtworkRead:
    return await ArtworkService(db).update(ctx, artwork_id, payload)


@router.delete(
    "/{artwork_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Artwork",
)
async def delete_artwork(artwork_id: UUID, db: DBDep, ctx: ContextDep) -> Response:
    await ArtworkService(db).delete(ctx, artwork_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
