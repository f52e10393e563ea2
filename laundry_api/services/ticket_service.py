"""Support tickets: public intake plus the admin reply/resolve workflow."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from laundry_api.core.errors import InvalidStatusError, NotFoundError, ValidationError
from laundry_api.db.enums import ReplySender, TicketStatus
from laundry_api.db.models import Ticket, TicketReply
from laundry_api.services import admin_events
from laundry_api.services.admin_events import AdminEvent
from laundry_api.services.store import commit_or_raise
from laundry_api.utils.normalization import normalize_phone


logger = logging.getLogger(__name__)

TICKET_NOT_FOUND = "Ticket not found"
CANONICAL_TICKET_STATUSES = [status.value for status in TicketStatus]


def _get_ticket(db: Session, ticket_id: UUID) -> Ticket:
    ticket = db.scalars(
        select(Ticket).options(selectinload(Ticket.replies)).where(Ticket.id == ticket_id)
    ).first()
    if not ticket:
        raise NotFoundError(TICKET_NOT_FOUND)
    return ticket


def _commit_and_announce(db: Session, ticket: Ticket, event: AdminEvent) -> Ticket:
    commit_or_raise(db, "Failed to save ticket")
    db.refresh(ticket)
    admin_events.publish(event, admin_events.ticket_payload(ticket))
    return ticket


def parse_ticket_status(value: str | None) -> TicketStatus:
    """Case-insensitive match against the three canonical ticket statuses."""
    token = (value or "").strip().lower()
    for status in TicketStatus:
        if status.value.lower() == token:
            return status
    raise InvalidStatusError(CANONICAL_TICKET_STATUSES)


def create_ticket(
    db: Session,
    *,
    user_name: str | None,
    mobile: str | None,
    issue: str | None,
    order_id: str | None = None,
) -> Ticket:
    """Open a ticket from the public support widget (no auth required)."""
    user_name = (user_name or "").strip()
    issue = (issue or "").strip()
    normalized_mobile = normalize_phone(mobile)
    if not user_name or not normalized_mobile or not issue:
        raise ValidationError("Name, mobile, and issue are required.")

    ticket = Ticket(
        user_name=user_name,
        mobile=normalized_mobile,
        order_id=(order_id or "").strip() or None,
        issue=issue,
        status=TicketStatus.PENDING,
    )
    db.add(ticket)
    ticket = _commit_and_announce(db, ticket, AdminEvent.NEW_TICKET)
    logger.info("Ticket created", extra={"ticket_id": str(ticket.id)})
    return ticket


def list_tickets(db: Session) -> list[Ticket]:
    stmt = (
        select(Ticket)
        .options(selectinload(Ticket.replies))
        .order_by(Ticket.created_at.desc())
    )
    return list(db.scalars(stmt).all())


def reply(db: Session, ticket_id: UUID, message: str | None) -> Ticket:
    """Append an admin reply; the ticket moves to Contacted."""
    message = (message or "").strip()
    if not message:
        raise ValidationError("Message is required.", field="message")

    ticket = _get_ticket(db, ticket_id)
    ticket.replies.append(TicketReply(sender=ReplySender.ADMIN, message=message))
    ticket.status = TicketStatus.CONTACTED
    return _commit_and_announce(db, ticket, AdminEvent.TICKET_UPDATED)


def close(db: Session, ticket_id: UUID) -> Ticket:
    """Resolve the ticket regardless of its current state."""
    ticket = _get_ticket(db, ticket_id)
    ticket.status = TicketStatus.RESOLVED
    return _commit_and_announce(db, ticket, AdminEvent.TICKET_UPDATED)


def set_status(db: Session, ticket_id: UUID, status: str | None) -> Ticket:
    target = parse_ticket_status(status)
    ticket = _get_ticket(db, ticket_id)
    ticket.status = target
    return _commit_and_announce(db, ticket, AdminEvent.TICKET_UPDATED)


def delete_ticket(db: Session, ticket_id: UUID) -> None:
    ticket = _get_ticket(db, ticket_id)
    payload = {"id": str(ticket.id)}
    db.delete(ticket)
    commit_or_raise(db, "Failed to delete ticket")
    logger.info("Ticket deleted", extra={"ticket_id": payload["id"]})
    admin_events.publish(AdminEvent.TICKET_DELETED, payload)
