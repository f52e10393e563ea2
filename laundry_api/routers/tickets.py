"""Support ticket APIs: public intake, admin inbox and reply workflow."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from laundry_api.core.deps import get_db, require_admin
from laundry_api.schemas.common import MessageResponse
from laundry_api.schemas.ticket import (
    TicketCreate,
    TicketRead,
    TicketReplyRequest,
    TicketStatusUpdate,
)
from laundry_api.services import ticket_service

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.post("", response_model=TicketRead, status_code=status.HTTP_201_CREATED)
def create_ticket(body: TicketCreate, db: Session = Depends(get_db)):
    """Open a ticket. No account is needed."""
    return ticket_service.create_ticket(
        db,
        user_name=body.user_name,
        mobile=body.mobile,
        issue=body.issue,
        order_id=body.order_id,
    )


@router.get("", response_model=list[TicketRead], dependencies=[Depends(require_admin)])
def list_tickets(db: Session = Depends(get_db)):
    return ticket_service.list_tickets(db)


@router.post(
    "/{ticket_id}/reply",
    response_model=TicketRead,
    dependencies=[Depends(require_admin)],
)
def reply_to_ticket(ticket_id: UUID, body: TicketReplyRequest, db: Session = Depends(get_db)):
    """Append an admin reply; the ticket becomes Contacted."""
    return ticket_service.reply(db, ticket_id, body.message)


@router.post(
    "/{ticket_id}/close",
    response_model=TicketRead,
    dependencies=[Depends(require_admin)],
)
def close_ticket(ticket_id: UUID, db: Session = Depends(get_db)):
    return ticket_service.close(db, ticket_id)


@router.put("/{ticket_id}", response_model=TicketRead, dependencies=[Depends(require_admin)])
def update_ticket_status(
    ticket_id: UUID, body: TicketStatusUpdate, db: Session = Depends(get_db)
):
    return ticket_service.set_status(db, ticket_id, body.status)


@router.delete(
    "/{ticket_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_ticket(ticket_id: UUID, db: Session = Depends(get_db)):
    ticket_service.delete_ticket(db, ticket_id)
    return MessageResponse(message="Ticket deleted")
