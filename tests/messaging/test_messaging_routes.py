# tests/messaging/test_messaging_routes.py
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from httpx import AsyncClient
from starlette.websockets import WebSocketState

from main import app
from inkconnect.database.enums import MessageStatus, MessageType
from inkconnect.database.models import Profile
from inkconnect.database.session import get_db
from inkconnect.messaging import schemas as msg_schemas
from inkconnect.messaging.manager import ConnectionManager


@pytest.fixture
def fake_message_read(fake_client_profile: Profile) -> msg_schemas.MessageRead:
    return msg_schemas.MessageRead(
        id=uuid4(),
        conversation_id="a" * 64,
        sender_id=fake_client_profile.id,
        recipient_id=uuid4(),
        content="Can I move my session to Friday?",
        message_type=MessageType.TEXT,
        status=MessageStatus.SENT,
        created_at=datetime.now(timezone.utc),
    )


@pytest.mark.asyncio
@patch("inkconnect.messaging.routes.services.send_message", new_callable=AsyncMock)
async def test_send_message_success(
    mock_send_message: AsyncMock,
    fake_message_read: msg_schemas.MessageRead,
    mock_current_client: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_send_message.return_value = fake_message_read
    payload = {"recipient_id": str(fake_message_read.recipient_id), "content": fake_message_read.content}

    response = await async_client.post("/messages", json=payload)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["id"] == str(fake_message_read.id)
    _, ctx, body = mock_send_message.call_args.args
    assert ctx.profile_id == mock_current_client.id
    assert body.recipient_id == fake_message_read.recipient_id


@pytest.mark.asyncio
@patch("inkconnect.messaging.routes.services.unread_count", new_callable=AsyncMock)
async def test_unread_count(
    mock_unread: AsyncMock,
    mock_current_artist: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_unread.return_value = 4

    response = await async_client.get("/messages/unread-count")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"unread_count": 4}
    assert mock_unread.call_args.args[1] == mock_current_artist.id


@pytest.mark.asyncio
async def test_admin_thread_view_requires_admin(
    mock_current_client: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get(f"/messages/thread/{uuid4()}/{uuid4()}")

    assert response.status_code == status.HTTP_403_FORBIDDEN


# --- Live feed ---


@pytest.mark.asyncio
async def test_manager_publishes_to_every_socket_of_each_profile() -> None:
    feed = ConnectionManager()
    first, second = uuid4(), uuid4()
    sockets = {first: [AsyncMock(), AsyncMock()], second: [AsyncMock()]}
    for profile_id, conns in sockets.items():
        for ws in conns:
            await feed.connect(profile_id, ws)

    for conns in sockets.values():
        for ws in conns:
            ws.client_state = WebSocketState.CONNECTED
    await feed.publish([first, second, first], "appointment.updated", {"id": "x"})

    for conns in sockets.values():
        for ws in conns:
            ws.send_text.assert_awaited_once()
            event = json.loads(ws.send_text.call_args.args[0])
            assert event == {"type": "appointment.updated", "data": {"id": "x"}}

    feed.disconnect(first, sockets[first][0])
    feed.disconnect(first, sockets[first][1])
    assert first not in feed.active_connections


def test_websocket_ping_pong(fake_artist_profile: Profile) -> None:
    async def _override():
        yield AsyncMock()

    app.dependency_overrides[get_db] = _override
    try:
        with patch(
            "inkconnect.messaging.websocket.get_current_profile_from_ws",
            new=AsyncMock(return_value=fake_artist_profile),
        ):
            with TestClient(app) as client:
                with client.websocket_connect("/ws/events") as ws:
                    ws.send_text(json.dumps({"type": "ping"}))
                    assert json.loads(ws.receive_text()) == {"type": "pong", "data": None}

                    ws.send_text("not json")
                    assert json.loads(ws.receive_text())["type"] == "error"

                    ws.send_text(json.dumps({"type": "dance"}))
                    reply = json.loads(ws.receive_text())
                    assert reply["data"]["error"] == "Unsupported event type: dance"
    finally:
        app.dependency_overrides.pop(get_db, None)
