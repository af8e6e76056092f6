"""WebSocket endpoint streaming publication events to vendors and admins."""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from common.logging import get_logger

from ..dependencies import context_from_token
from ..realtime.sessions import ADMIN_ROOM, QueueSession, get_session_registry, vendor_room

LOGGER = get_logger(__name__)

router = APIRouter(tags=["realtime"])

# Application-defined close code for a rejected token.
WS_UNAUTHORIZED = 4401


async def _pump(websocket: WebSocket, session: QueueSession) -> None:
    while True:
        message = await session.queue.get()
        await websocket.send_json(message)


@router.websocket("/ws/notifications")
async def notifications(websocket: WebSocket, token: Optional[str] = Query(default=None)) -> None:
    context = context_from_token(token)
    if context is None:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    await websocket.accept()
    registry = get_session_registry()
    session = QueueSession(loop=asyncio.get_running_loop(), user_id=context.user_id)
    room = ADMIN_ROOM if context.is_admin else vendor_room(context.user_id)
    registry.add(session, room)
    session.send({"type": "connected", "sessionId": session.session_id, "rooms": [room]})

    sender = asyncio.create_task(_pump(websocket, session))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") == "ping":
                session.send({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        registry.remove(session.session_id)
        LOGGER.info("Notification socket closed", user=context.user_id, room=room)
