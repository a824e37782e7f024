"""WebSocket channel for live pull request rooms.

Protocol (JSON frames, both directions ``{"event": ..., "data": {...}}``):

- client -> server: ``join-pr`` / ``leave-pr`` with ``{projectId, pullNumber}``
- server -> client: ``room-joined``, ``room-left``, ``error`` and the room
  events (``comment-added``, ``comment-updated``, ``comment-deleted``,
  ``review-submitted``)
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from ..schemas.realtime import ClientMessage, RoomTarget
from ..services.rooms import RoomRegistry, get_room_registry, room_key
from ..utils.tokens import InvalidTokenError, decode_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

UNAUTHORIZED_CLOSE_CODE = 4401


class WebSocketConnection:
    """A joined client as seen by the room registry."""

    def __init__(self, websocket: WebSocket, user_id: int):
        self.id = uuid.uuid4().hex[:12]
        self.user_id = user_id
        self.websocket = websocket
        # One frame at a time per socket
        self._send_lock = asyncio.Lock()

    async def send(self, event: str, payload: Any) -> None:
        async with self._send_lock:
            await self.websocket.send_json({"event": event, "data": payload})


def _extract_token(websocket: WebSocket) -> str | None:
    token = websocket.query_params.get("token")
    if token:
        return token
    authorization = websocket.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


async def _handle_message(
    connection: WebSocketConnection,
    rooms: RoomRegistry,
    message: ClientMessage,
) -> None:
    match message.event:
        case "join-pr":
            target = RoomTarget.model_validate(message.data)
            client_count = rooms.join(connection, target.project_id, target.pull_number)
            await connection.send(
                "room-joined",
                {
                    "room": room_key(target.project_id, target.pull_number),
                    "clientCount": client_count,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "connectionId": connection.id,
                },
            )

        case "leave-pr":
            target = RoomTarget.model_validate(message.data)
            rooms.leave(connection, target.project_id, target.pull_number)
            await connection.send(
                "room-left",
                {"room": room_key(target.project_id, target.pull_number)},
            )

        case _:
            await connection.send("error", {"message": f"Unknown event: {message.event}"})


@router.websocket("/ws")
async def realtime_channel(
    websocket: WebSocket,
    rooms: RoomRegistry = Depends(get_room_registry),
) -> None:
    """Authenticate once, then serve join/leave requests until the client goes away."""
    try:
        user_id = decode_access_token(_extract_token(websocket))
    except InvalidTokenError as e:
        logger.info(f"Rejected real-time connection: {e}")
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE, reason=f"Authentication error: {e}")
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket, user_id)
    logger.debug(f"Connection {connection.id} opened for user {user_id}")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = ClientMessage.model_validate_json(raw)
                await _handle_message(connection, rooms, message)
            except PydanticValidationError as e:
                await connection.send(
                    "error",
                    {
                        "message": "Invalid message",
                        "errors": e.errors(include_url=False, include_context=False),
                    },
                )
    except WebSocketDisconnect:
        pass
    finally:
        rooms.disconnect(connection)
        logger.debug(f"Connection {connection.id} closed")
