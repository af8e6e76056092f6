"""Room-based registry of connected realtime sessions.

The registry does not know about transports. A session is anything with an id
and a synchronous ``send``; the WebSocket route adapts a socket to that shape
by pushing onto an asyncio queue that the connection task drains.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Set

from common.logging import get_logger

LOGGER = get_logger(__name__)

ADMIN_ROOM = "admins"


def vendor_room(vendor_id: int | str) -> str:
    return f"vendor_{vendor_id}"


class RealtimeSession(Protocol):
    session_id: str

    def send(self, message: Dict[str, Any]) -> None:
        ...


@dataclass
class QueueSession:
    """Session that hands messages to an asyncio queue owned by a connection task."""

    loop: asyncio.AbstractEventLoop
    user_id: Optional[int] = None
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    queue: "asyncio.Queue[Dict[str, Any]]" = field(default_factory=asyncio.Queue)

    def send(self, message: Dict[str, Any]) -> None:
        # Workflow transitions run in the request threadpool, not on the loop.
        self.loop.call_soon_threadsafe(self.queue.put_nowait, message)


class SessionRegistry:
    """Tracks sessions and the rooms they joined."""

    def __init__(self) -> None:
        self._sessions: dict[str, RealtimeSession] = {}
        self._rooms: dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def add(self, session: RealtimeSession, *rooms: str) -> None:
        with self._lock:
            self._sessions[session.session_id] = session
            for room in rooms:
                self._rooms.setdefault(room, set()).add(session.session_id)
        LOGGER.info("Realtime session joined", session=session.session_id, rooms=list(rooms))

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
            for room in list(self._rooms):
                members = self._rooms[room]
                members.discard(session_id)
                if not members:
                    del self._rooms[room]
        LOGGER.info("Realtime session left", session=session_id)

    def rooms_of(self, session_id: str) -> Set[str]:
        with self._lock:
            return {room for room, members in self._rooms.items() if session_id in members}

    def room_size(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def broadcast(self, room: str, message: Dict[str, Any]) -> int:
        """Send ``message`` to every session in ``room``. Returns the delivery count."""
        with self._lock:
            targets = [
                self._sessions[session_id]
                for session_id in self._rooms.get(room, ())
                if session_id in self._sessions
            ]

        delivered = 0
        for session in targets:
            try:
                session.send(message)
                delivered += 1
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning(
                    "Realtime delivery failed",
                    session=session.session_id,
                    room=room,
                    error=str(exc),
                )
        return delivered


# Singleton registry (replaced in tests)
_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def set_session_registry(registry: SessionRegistry) -> None:
    global _registry
    _registry = registry


__all__ = [
    "ADMIN_ROOM",
    "QueueSession",
    "RealtimeSession",
    "SessionRegistry",
    "get_session_registry",
    "set_session_registry",
    "vendor_room",
]
