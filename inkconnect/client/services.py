"""
inkconnect/client/services.py

Client Service Layer
- Client self-service (record created on first access)
- Clients of an artist (everyone who has booked them)
- Admin listing of all clients
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.appointment.models import Appointment
from inkconnect.artist.models import Artist
from inkconnect.client import schemas
from inkconnect.client.models import Client
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import NotFoundError
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.session import commit_or_rollback
from inkconnect.profile.services import ProfileService

logger = logging.getLogger(__name__)


def to_client_read(client: Client) -> schemas.ClientRead:
    data: dict[str, Any] = {
        column.key: getattr(client, column.key) for column in Client.__table__.columns
    }
    if client.profile:
        data["full_name"] = client.profile.full_name
        data["email"] = client.profile.email
        data["profile_image"] = client.profile.profile_image
    return schemas.ClientRead.model_validate(data)


class ClientService:
    """Client record operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_client_or_404(self, client_id: UUID) -> Client:
        client = await self.db.get(Client, client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    async def get_me(self, ctx: RequestContext) -> schemas.ClientRead:
        client = await ProfileService(self.db).get_client_record(ctx)
        return to_client_read(client)

    async def update_me(
        self, ctx: RequestContext, payload: schemas.ClientUpdate
    ) -> schemas.ClientRead:
        client = await ProfileService(self.db).get_client_record(ctx)
        updates = payload.model_dump(exclude_unset=True)

        preferred = updates.get("preferred_artist_id")
        if preferred is not None and not await self.db.get(Artist, preferred):
            raise NotFoundError("Preferred artist not found")

        for field, value in updates.items():
            setattr(client, field, value)
        await commit_or_rollback(self.db, "update client")
        await self.db.refresh(client)
        logger.info(f"[CLIENT] Updated client {client.id}")
        return to_client_read(client)

    async def list_for_artist(
        self, ctx: RequestContext, skip: int, limit: int
    ) -> PaginatedResponse[schemas.ClientRead]:
        """Clients with at least one appointment with the calling artist."""
        artist = await ProfileService(self.db).get_artist_record(ctx)
        client_ids = select(Appointment.client_id).where(Appointment.artist_id == artist.id)
        return await self._paginate(Client.id.in_(client_ids), skip, limit)

    async def list_all(self, skip: int, limit: int) -> PaginatedResponse[schemas.ClientRead]:
        return await self._paginate(None, skip, limit)

    async def count_clients(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Client))
        return int(result.scalar_one())

    async def _paginate(
        self, condition: Any, skip: int, limit: int
    ) -> PaginatedResponse[schemas.ClientRead]:
        count_stmt = select(func.count()).select_from(Client)
        stmt = select(Client).order_by(Client.created_at.desc())
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            stmt = stmt.where(condition)

        total = int((await self.db.execute(count_stmt)).scalar_one())
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        items = [to_client_read(c) for c in result.scalars().all()]
        return PaginatedResponse[schemas.ClientRead].from_page(items, total, skip)
