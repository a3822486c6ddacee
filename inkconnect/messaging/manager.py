"""
inkconnect/messaging/manager.py

WebSocket connection manager for the per-profile live change feed.
- Handles connection lifecycle for each profile (several tabs per profile allowed)
- Pushes `{type, data}` events to every socket of the addressed profiles
"""

import json
import logging
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections per profile.
    """

    def __init__(self) -> None:
        # Mapping of profile_id to connected WebSocket clients
        self.active_connections: dict[UUID, list[WebSocket]] = {}

    async def connect(self, profile_id: UUID, websocket: WebSocket) -> None:
        """
        Accepts a new WebSocket connection and registers it for the profile.
        """
        await websocket.accept()
        self.active_connections.setdefault(profile_id, []).append(websocket)

    def disconnect(self, profile_id: UUID, websocket: WebSocket) -> None:
        """
        Removes a WebSocket connection from the profile's pool.
        """
        connections = self.active_connections.get(profile_id)
        if not connections:
            return
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            del self.active_connections[profile_id]

    async def send_to_profile(self, profile_id: UUID, message: str) -> None:
        for connection in list(self.active_connections.get(profile_id, [])):
            if connection.client_state != WebSocketState.CONNECTED:
                self.disconnect(profile_id, connection)
                continue
            try:
                await connection.send_text(message)
            except RuntimeError as e:
                logger.warning(f"[FEED] Dropping dead socket for profile {profile_id}: {e}")
                self.disconnect(profile_id, connection)

    async def publish(self, profile_ids: Iterable[UUID], event_type: str, data: Any) -> None:
        """
        Push an event to each distinct profile in `profile_ids`.
        """
        payload = json.dumps({"type": event_type, "data": jsonable_encoder(data)})
        for profile_id in set(profile_ids):
            await self.send_to_profile(profile_id, payload)
        logger.debug(f"[FEED] Published '{event_type}'")


# Global instance of the manager for import and use across modules
manager = ConnectionManager()
