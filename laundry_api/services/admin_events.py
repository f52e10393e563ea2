"""Admin realtime events facade.

Services call ``publish`` after their write commits; callers never touch the
connection manager directly. Delivery is best-effort: a failed push is logged
and never fails the request that produced the event.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

import anyio

from laundry_api.core.websocket import ConnectionManager, manager
from laundry_api.db.models import Order, Ticket
from laundry_api.schemas.order import AdminOrderRead
from laundry_api.schemas.ticket import TicketRead


logger = logging.getLogger(__name__)


class AdminEvent(str, Enum):
    """Closed set of events pushed to the admin channel."""

    NEW_ORDER = "admin:newOrder"
    ORDER_UPDATED = "admin:orderUpdated"
    ORDER_DELETED = "admin:orderDeleted"
    NEW_TICKET = "admin:newTicket"
    TICKET_UPDATED = "admin:ticketUpdated"
    TICKET_DELETED = "admin:ticketDeleted"


def build_message(event: AdminEvent, payload: dict[str, Any]) -> dict[str, Any]:
    return {"type": event.value, "data": payload}


def order_payload(order: Order) -> dict[str, Any]:
    return AdminOrderRead.model_validate(order).to_wire()


def ticket_payload(ticket: Ticket) -> dict[str, Any]:
    return TicketRead.model_validate(ticket).to_wire()


def _run_from_sync(target: ConnectionManager, message: dict[str, Any]) -> None:
    """
    Run ``target.broadcast`` on the event loop from sync service code.

    Sync endpoints execute in AnyIO worker threads, so the broadcast is handed
    back to the main loop. Outside a worker thread (CLI, plain tests) a
    private loop is used instead.
    """

    async def _runner() -> None:
        await target.broadcast(message)

    try:
        anyio.from_thread.run(_runner)
    except RuntimeError:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            anyio.run(_runner)
            return
        raise RuntimeError("publish called from async context; use publish_async instead")


def publish(
    event: AdminEvent,
    payload: dict[str, Any],
    *,
    target: ConnectionManager | None = None,
) -> None:
    """Fan an event out to every connected admin subscriber."""
    target = target or manager
    if not target.has_subscribers():
        return

    try:
        _run_from_sync(target, build_message(event, payload))
    except Exception:
        logger.exception("Failed to publish %s to admin subscribers", event.value)


async def publish_async(
    event: AdminEvent,
    payload: dict[str, Any],
    *,
    target: ConnectionManager | None = None,
) -> None:
    target = target or manager
    try:
        await target.broadcast(build_message(event, payload))
    except Exception:
        logger.exception("Failed to publish %s to admin subscribers", event.value)
