"""
inkconnect/client/routes.py

Client API Routes
- Client self-service (client role)
- Artist view of their clients
- Admin listing of all clients
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from inkconnect.client import schemas
from inkconnect.client.services import ClientService
from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import (
    AdminDep,
    DBDep,
    PaginationParams,
    require_artist,
    require_client,
)
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse

router = APIRouter(prefix="/clients", tags=["Clients"])

ClientDep = Annotated[RequestContext, Depends(require_client)]
ArtistDep = Annotated[RequestContext, Depends(require_artist)]


@router.get(
    "/me",
    response_model=schemas.ClientRead,
    status_code=status.HTTP_200_OK,
    summary="Get My Client Record",
    description="Returns the caller's client record, creating an empty one on first access.",
)
async def get_my_client(db: DBDep, ctx: ClientDep) -> schemas.ClientRead:
    return await ClientService(db).get_me(ctx)


@router.patch(
    "/me",
    response_model=schemas.ClientRead,
    status_code=status.HTTP_200_OK,
    summary="Update My Client Record",
)
@limiter.limit("10/minute")
async def update_my_client(
    request: Request, payload: schemas.ClientUpdate, db: DBDep, ctx: ClientDep
) -> schemas.ClientRead:
    return await ClientService(db).update_me(ctx, payload)


@router.get(
    "/mine",
    response_model=PaginatedResponse[schemas.ClientRead],
    status_code=status.HTTP_200_OK,
    summary="List My Clients (Artist)",
)
async def list_my_clients(
    db: DBDep, ctx: ArtistDep, pagination: PaginationParams = Depends()
) -> PaginatedResponse[schemas.ClientRead]:
    return await ClientService(db).list_for_artist(ctx, pagination.skip, pagination.limit)


@router.get(
    "",
    response_model=PaginatedResponse[schemas.ClientRead],
    status_code=status.HTTP_200_OK,
    summary="List All Clients (Admin)",
)
async def list_clients(
    db: DBDep, ctx: AdminDep, pagination: PaginationParams = Depends()
) -> PaginatedResponse[schemas.ClientRead]:
    return await ClientService(db).list_all(pagination.skip, pagination.limit)
