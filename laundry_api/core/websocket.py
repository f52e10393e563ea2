"""
WebSocket connection manager for the admin realtime channel.

Holds the live fan-out set of authenticated admin sockets. Every socket in
here passed the admin check at handshake time; nothing is re-checked per
message.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Set
from uuid import UUID
import asyncio
import json
import logging

from fastapi import WebSocket

from laundry_api.schemas.auth import TokenClaims


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriberSession:
    """Identity and expiry of one admin socket, taken from its handshake token."""

    user_id: UUID
    name: str | None
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "SubscriberSession":
        return cls(user_id=claims.sub, name=claims.name, expires_at=claims.exp)

    def seconds_remaining(self, now: datetime | None = None) -> float:
        now = now or datetime.now(timezone.utc)
        return (self.expires_at - now).total_seconds()

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.seconds_remaining(now) <= 0


class ConnectionManager:
    """Manages admin WebSocket connections per user."""

    def __init__(self):
        # user_id -> set of active WebSocket connections
        self._connections: Dict[UUID, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, session: SubscriberSession):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.setdefault(session.user_id, set()).add(websocket)
        logger.info(
            "Admin subscriber connected",
            extra={"user_id": str(session.user_id), "connections": self.get_total_connections()},
        )

    async def disconnect(self, websocket: WebSocket, user_id: UUID):
        """Remove a WebSocket connection."""
        async with self._lock:
            if user_id in self._connections:
                self._connections[user_id].discard(websocket)
                if not self._connections[user_id]:
                    del self._connections[user_id]

    async def broadcast(self, message: dict):
        """
        Send a message to every admin connection.

        At-most-once: a socket that fails the send is dropped and the message
        is not retried for it.
        """
        async with self._lock:
            targets = [
                (user_id, ws)
                for user_id, sockets in self._connections.items()
                for ws in sockets
            ]

        if not targets:
            return

        data = json.dumps(message)
        closed = []

        for user_id, ws in targets:
            try:
                await ws.send_text(data)
            except Exception:
                # Connection closed or errored
                closed.append((user_id, ws))

        if closed:
            logger.info("Dropping %d dead admin subscriber(s)", len(closed))
            for user_id, ws in closed:
                await self.disconnect(ws, user_id)

    async def close_user(self, user_id: UUID, *, code: int, reason: str):
        """Close every connection held by a user (e.g. after losing admin role)."""
        async with self._lock:
            sockets = self._connections.pop(user_id, set())

        for ws in sockets:
            try:
                await ws.close(code=code, reason=reason)
            except Exception:
                logger.debug("Socket already closed for user %s", user_id)

    def get_connected_count(self, user_id: UUID) -> int:
        """Get the number of active connections for a user."""
        return len(self._connections.get(user_id, set()))

    def get_total_connections(self) -> int:
        """Get total number of active connections across all users."""
        return sum(len(conns) for conns in self._connections.values())

    def has_subscribers(self) -> bool:
        return bool(self._connections)


# Singleton instance
manager = ConnectionManager()
