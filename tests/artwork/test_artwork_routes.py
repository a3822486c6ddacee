# tests/artwork/test_artwork_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from inkconnect.artwork import schemas
from inkconnect.artwork.services import ArtworkService
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import ArtworkStatus
from inkconnect.database.models import Profile


@pytest.fixture
def fake_artwork_read() -> schemas.ArtworkRead:
    return schemas.ArtworkRead(
        id=uuid4(),
        artist_id=uuid4(),
        title="Koi sleeve",
        image_url="https://inkconnect-media.s3.us-east-1.amazonaws.com/artwork/koi.png",
        style_tags=["japanese"],
        is_public=True,
        is_portfolio_piece=True,
        status=ArtworkStatus.COMPLETED,
        created_at=datetime.now(timezone.utc),
    )


@pytest.mark.asyncio
@patch.object(ArtworkService, "upload", new_callable=AsyncMock)
async def test_upload_artwork_multipart(
    mock_upload: AsyncMock,
    fake_artwork_read: schemas.ArtworkRead,
    mock_current_artist: Profile,
    async_client: AsyncClient,
    override_get_db: None,
    png_bytes: bytes,
) -> None:
    mock_upload.return_value = fake_artwork_read

    response = await async_client.post(
        "/artworks",
        files={"file": ("koi.png", png_bytes, "image/png")},
        data={"title": "Koi sleeve", "style_tags": "japanese, color", "status": "in_progress"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["title"] == "Koi sleeve"
    ctx, _, meta = mock_upload.call_args.args
    assert ctx.profile_id == mock_current_artist.id
    assert meta.title == "Koi sleeve"
    assert meta.style_tags == ["japanese", "color"]
    assert meta.status == ArtworkStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_upload_artwork_forbidden_for_client(
    mock_current_client: Profile,
    async_client: AsyncClient,
    override_get_db: None,
    png_bytes: bytes,
) -> None:
    response = await async_client.post(
        "/artworks",
        files={"file": ("koi.png", png_bytes, "image/png")},
        data={"title": "Mine"},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(ArtworkService, "list_for_artist", new_callable=AsyncMock)
async def test_public_listing_is_anonymous(
    mock_list: AsyncMock,
    fake_artwork_read: schemas.ArtworkRead,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_list.return_value = PaginatedResponse[schemas.ArtworkRead](
        total_count=1, has_next_page=False, items=[fake_artwork_read]
    )

    response = await async_client.get(
        f"/artworks/artist/{fake_artwork_read.artist_id}", params={"style": "japanese"}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["items"][0]["id"] == str(fake_artwork_read.id)
    ctx, artist_id = mock_list.call_args.args
    assert ctx is None
    assert artist_id == fake_artwork_read.artist_id
    assert mock_list.call_args.kwargs["style"] == "japanese"
