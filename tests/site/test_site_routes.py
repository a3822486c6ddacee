# tests/site/test_site_routes.py
import io
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import UploadFile, status
from httpx import AsyncClient

from inkconnect.core.exceptions import UpstreamError, ValidationError
from inkconnect.database.models import Profile
from inkconnect.site import services
from inkconnect.site.schemas import ContactRequest

CONTACT = {
    "name": "Riley",
    "email": "riley@example.com",
    "subject": "Cover-up consult",
    "message": "Can you cover an old tribal piece?",
}


@pytest.mark.asyncio
@patch("inkconnect.site.routes.services.submit_contact", new_callable=AsyncMock)
async def test_contact_success(mock_submit: AsyncMock, async_client: AsyncClient) -> None:
    response = await async_client.post("/contact", json=CONTACT)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert mock_submit.call_args.args[0].subject == "Cover-up consult"


@pytest.mark.asyncio
@patch("inkconnect.site.routes.services.submit_contact", new_callable=AsyncMock)
async def test_contact_delivery_failure_returns_error(
    mock_submit: AsyncMock, async_client: AsyncClient
) -> None:
    mock_submit.side_effect = UpstreamError("Mail provider rejected the message")

    response = await async_client.post("/contact", json=CONTACT)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Mail provider rejected the message"}


@pytest.mark.asyncio
async def test_contact_requires_message(async_client: AsyncClient) -> None:
    response = await async_client.post("/contact", json={**CONTACT, "message": "   "})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_contact_sends_notification_and_confirmation() -> None:
    with patch(
        "inkconnect.site.services.send_contact_notification", new_callable=AsyncMock
    ) as notify, patch(
        "inkconnect.site.services.send_contact_confirmation", new_callable=AsyncMock
    ) as confirm:
        await services.submit_contact(ContactRequest(**CONTACT))

    notify.assert_awaited_once_with(
        "Riley", "riley@example.com", "Cover-up consult", CONTACT["message"]
    )
    confirm.assert_awaited_once()


@pytest.mark.asyncio
async def test_service_worker_script(async_client: AsyncClient) -> None:
    response = await async_client.get("/sw.js")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("application/javascript")
    assert '"rising-ink-v1"' in response.text
    assert '"/static/js/bundle.js"' in response.text
    assert "caches.delete" in response.text


@pytest.mark.asyncio
async def test_security_headers_present(async_client: AsyncClient) -> None:
    response = await async_client.get("/")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_hero_background_write_requires_admin(
    mock_current_client: Profile, async_client: AsyncClient, override_get_db: None, png_bytes: bytes
) -> None:
    response = await async_client.put(
        "/site/hero-background", files={"file": ("hero.png", png_bytes, "image/png")}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


# --- Hero background persistence ---


@pytest.mark.asyncio
async def test_hero_background_roundtrip(db_session, png_bytes):
    assert (await services.get_hero_background(db_session)).image is None

    saved = await services.set_hero_background(
        db_session, UploadFile(file=io.BytesIO(png_bytes), filename="hero.png")
    )
    assert saved.image.startswith("data:image/png;base64,")
    assert (await services.get_hero_background(db_session)).image == saved.image

    await services.clear_hero_background(db_session)
    assert (await services.get_hero_background(db_session)).image is None


@pytest.mark.asyncio
async def test_hero_background_size_limit(db_session, png_bytes):
    oversized = png_bytes + b"\0" * services.HERO_MAX_FILE_SIZE

    with pytest.raises(ValidationError) as exc_info:
        await services.set_hero_background(
            db_session, UploadFile(file=io.BytesIO(oversized), filename="hero.png")
        )

    assert exc_info.value.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    assert (await services.get_hero_background(db_session)).image is None


@pytest.mark.asyncio
async def test_contact_with_unreachable_mail_provider(
    unreachable_mail_provider, async_client: AsyncClient
) -> None:
    response = await async_client.post("/contact", json=CONTACT)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert list(body) == ["error"]
    assert "connection refused" in body["error"]
