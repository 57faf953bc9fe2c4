"""
Presence registry for real-time notifications.

Tracks which live WebSocket sessions belong to which user so that
server-sent messages reach every tab/device the user has open.

Dispatch code depends only on the PresenceRegistry protocol; the
in-memory implementation is per process. A multi-process deployment
swaps in a shared pub/sub implementation of the same protocol.
"""

from typing import Dict, Protocol
from uuid import UUID, uuid4
import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class PresenceRegistry(Protocol):
    """What notification dispatch needs from the live channel."""

    async def connect(self, websocket: WebSocket, user_id: UUID) -> str: ...

    async def disconnect(self, user_id: UUID, session_id: str) -> None: ...

    async def send_to_user(self, user_id: UUID, message: dict) -> int: ...

    def session_ids(self, user_id: UUID) -> set[str]: ...

    def connected_count(self, user_id: UUID) -> int: ...

    def total_connections(self) -> int: ...


class InMemoryPresenceRegistry:
    """Maps user_id -> {session_id: WebSocket} for this process."""

    def __init__(self):
        self._sessions: Dict[UUID, Dict[str, WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: UUID) -> str:
        """Accept and register a new WebSocket session. Returns its id."""
        await websocket.accept()
        session_id = uuid4().hex
        async with self._lock:
            self._sessions.setdefault(user_id, {})[session_id] = websocket
        return session_id

    async def disconnect(self, user_id: UUID, session_id: str) -> None:
        """Remove a session; drop the user entry once no sessions remain."""
        async with self._lock:
            self._remove(user_id, session_id)

    async def send_to_user(self, user_id: UUID, message: dict) -> int:
        """
        Send a message to every session of a user.

        Returns the number of sessions that accepted it. Sessions that
        fail on send are pruned.
        """
        async with self._lock:
            sessions = dict(self._sessions.get(user_id, {}))

        if not sessions:
            return 0

        data = json.dumps(message, default=str)
        delivered = 0
        closed = []

        for session_id, ws in sessions.items():
            try:
                await ws.send_text(data)
                delivered += 1
            except Exception as exc:
                logger.debug("Dropping dead websocket session %s: %s", session_id, exc)
                closed.append(session_id)

        if closed:
            async with self._lock:
                for session_id in closed:
                    self._remove(user_id, session_id)

        return delivered

    def session_ids(self, user_id: UUID) -> set[str]:
        """Get the ids of a user's open sessions."""
        return set(self._sessions.get(user_id, {}))

    def connected_count(self, user_id: UUID) -> int:
        """Get the number of active sessions for a user."""
        return len(self._sessions.get(user_id, {}))

    def total_connections(self) -> int:
        """Get total number of active sessions across all users."""
        return sum(len(sessions) for sessions in self._sessions.values())

    def _remove(self, user_id: UUID, session_id: str) -> None:
        sessions = self._sessions.get(user_id)
        if sessions is None:
            return
        sessions.pop(session_id, None)
        if not sessions:
            del self._sessions[user_id]
