"""
inkconnect/messaging/websocket.py

Live Change Feed WebSocket Route

- Authenticates the socket (token query parameter, bearer header or cookie)
- Registers it in the per-profile connection manager
- Server pushes `{type, data}` events for appointments and messages
- Clients may send `{"type": "ping"}` or
  `{"type": "message.send", "recipient_id": ..., "content": ...}`
"""

import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import get_current_profile_from_ws
from inkconnect.core.exceptions import APIError
from inkconnect.database.session import get_db
from inkconnect.messaging import schemas, services
from inkconnect.messaging.manager import manager

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter()
logger = logging.getLogger(__name__)


async def _send_error(websocket: WebSocket, message: str) -> None:
    await websocket.send_text(json.dumps({"type": "error", "data": {"error": message}}))


# ---------------------------------------------------
# WebSocket Endpoint
# ---------------------------------------------------
@router.websocket("/ws/events")
async def events_endpoint(websocket: WebSocket, db: AsyncSession = Depends(get_db)) -> None:
    """
    Handle the live change feed of the authenticated profile.
    """
    profile = await get_current_profile_from_ws(websocket, db)
    if profile is None:
        logger.warning("[WEBSOCKET] Rejected unauthenticated connection")
        return
    ctx = RequestContext.from_profile(profile)

    await manager.connect(ctx.profile_id, websocket)
    logger.info(f"[WEBSOCKET] Profile {ctx.profile_id} connected to live feed")

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                data = json.loads(raw_data)
            except json.JSONDecodeError:
                logger.warning(f"[WEBSOCKET] Invalid JSON format from profile {ctx.profile_id}")
                await _send_error(websocket, "Invalid JSON format")
                continue

            event_type = data.get("type") if isinstance(data, dict) else None
            if event_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong", "data": None}))
            elif event_type == "message.send":
                try:
                    payload = schemas.MessageCreate(
                        recipient_id=data.get("recipient_id"),
                        content=data.get("content") or "",
                        appointment_id=data.get("appointment_id"),
                    )
                    message = await services.send_message(db, ctx, payload)
                    await websocket.send_text(
                        json.dumps({"type": "message.sent", "data": jsonable_encoder(message)})
                    )
                except PydanticValidationError as e:
                    await _send_error(websocket, f"Invalid message: {e.errors()[0]['msg']}")
                except APIError as e:
                    await _send_error(websocket, e.message)
            else:
                await _send_error(websocket, f"Unsupported event type: {event_type}")

    except WebSocketDisconnect as exc:
        logger.info(
            f"[WEBSOCKET] Profile {ctx.profile_id} disconnected from live feed (code: {exc.code})"
        )
    except Exception as e:
        logger.error(
            f"[WEBSOCKET] Unexpected error in live feed for profile {ctx.profile_id}: {e}",
            exc_info=True,
        )
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason="Internal server error")
    finally:
        manager.disconnect(ctx.profile_id, websocket)
