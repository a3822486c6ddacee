# tests/review/test_review_routes.py
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from inkconnect.core.exceptions import NotFoundError
from inkconnect.database.models import Profile
from inkconnect.review.schemas import ReviewSummary


@pytest.mark.asyncio
async def test_rating_out_of_range_is_rejected(
    mock_current_client: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post(
        "/reviews", json={"appointment_id": str(uuid4()), "rating": 6}
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_artist_cannot_post_review(
    mock_current_artist: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post(
        "/reviews", json={"appointment_id": str(uuid4()), "rating": 5}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch("inkconnect.review.routes.services.get_review_summary", new_callable=AsyncMock)
async def test_review_summary_is_public(
    mock_summary: AsyncMock, async_client: AsyncClient, override_get_db: None
) -> None:
    artist_id = uuid4()
    mock_summary.return_value = ReviewSummary(
        artist_id=artist_id, average_rating=4.67, total_reviews=3
    )

    response = await async_client.get(f"/reviews/artist/{artist_id}/summary")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["average_rating"] == 4.67


@pytest.mark.asyncio
@patch("inkconnect.review.routes.services.list_artist_reviews", new_callable=AsyncMock)
async def test_reviews_for_unknown_artist(
    mock_list: AsyncMock, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.side_effect = NotFoundError("Artist not found")

    response = await async_client.get(f"/reviews/artist/{uuid4()}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == {"error": "Artist not found", "code": "not_found"}
