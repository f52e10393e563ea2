"""
WebSocket router for the admin realtime channel.

Admins subscribe at ``/ws/admin`` and receive ``{"type", "data"}`` events
for order and ticket changes. The token is checked once at handshake; after
that the socket is only closed on token expiry, heartbeat timeout, demotion
or client disconnect.
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Query, WebSocket
from starlette.websockets import WebSocketState

from laundry_api.core.config import settings
from laundry_api.core.deps import AUTH_HEADER, extract_bearer_token
from laundry_api.core.errors import NO_TOKEN, TOKEN_EXPIRED, AuthError
from laundry_api.core.security import decode_session_token
from laundry_api.core.websocket import SubscriberSession, manager

router = APIRouter(prefix="/ws", tags=["WebSocket"])

logger = logging.getLogger(__name__)

WS_UNAUTHORIZED = 4001
WS_FORBIDDEN = 4003
WS_HEARTBEAT_TIMEOUT = 4008


def _origin_is_allowed(origin: str | None, *, allowed: set[str], is_dev: bool) -> bool:
    if is_dev:
        return True
    if not origin:
        return False
    return origin in allowed


def _is_ping(data: str) -> bool:
    if data == "ping":
        return True
    try:
        message = json.loads(data)
    except ValueError:
        return False
    return isinstance(message, dict) and message.get("type") == "ping"


@router.websocket("/admin")
async def admin_events(websocket: WebSocket, token: str | None = Query(None)):
    """
    Admin event stream.

    Authenticates via ``?token=...`` or an ``Authorization: Bearer`` header.
    Close codes: 4001 missing/invalid/expired token (reason is the error
    code), 4003 non-admin or disallowed origin, 4008 heartbeat timeout.
    Clients keep the socket alive by sending ``ping`` and get ``pong`` back.
    """
    origin = websocket.headers.get("origin")
    if not _origin_is_allowed(
        origin, allowed=set(settings.cors_origins_list), is_dev=settings.is_dev
    ):
        await websocket.close(code=WS_FORBIDDEN, reason="Origin not allowed")
        return

    token = token or extract_bearer_token(websocket.headers.get(AUTH_HEADER))
    if not token:
        await websocket.close(code=WS_UNAUTHORIZED, reason=NO_TOKEN)
        return

    try:
        claims = decode_session_token(token)
    except AuthError as exc:
        await websocket.close(code=WS_UNAUTHORIZED, reason=exc.code)
        return

    if not claims.is_admin:
        await websocket.close(code=WS_FORBIDDEN, reason="Admin only")
        return

    session = SubscriberSession.from_claims(claims)
    await manager.connect(websocket, session)

    try:
        while websocket.application_state == WebSocketState.CONNECTED:
            heartbeat = settings.WS_HEARTBEAT_TIMEOUT_SECONDS
            remaining = session.seconds_remaining()
            try:
                message = await asyncio.wait_for(
                    websocket.receive(), timeout=max(min(heartbeat, remaining), 0)
                )
            except asyncio.TimeoutError:
                # A wait shorter than the heartbeat was cut off by token expiry
                if remaining < heartbeat or session.is_expired():
                    await websocket.close(code=WS_UNAUTHORIZED, reason=TOKEN_EXPIRED)
                else:
                    logger.info("Closing silent admin subscriber", extra={"user_id": str(session.user_id)})
                    await websocket.close(code=WS_HEARTBEAT_TIMEOUT, reason="Heartbeat timeout")
                break

            if message["type"] == "websocket.disconnect":
                break

            # Binary frames carry nothing the channel understands
            data = message.get("text")
            if data is not None and _is_ping(data):
                await websocket.send_text("pong")
    finally:
        await manager.disconnect(websocket, session.user_id)
