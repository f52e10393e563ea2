"""Support ticket schemas."""

from datetime import datetime
from uuid import UUID

from laundry_api.db.enums import ReplySender, TicketStatus
from laundry_api.schemas.common import CamelModel


class TicketCreate(CamelModel):
    user_name: str | None = None
    mobile: str | None = None
    order_id: str | None = None
    issue: str | None = None


class TicketReplyRead(CamelModel):
    sender: ReplySender
    message: str
    created_at: datetime


class TicketRead(CamelModel):
    id: UUID
    user_name: str
    mobile: str
    order_id: str | None = None
    issue: str
    status: TicketStatus
    replies: list[TicketReplyRead] = []
    created_at: datetime
    updated_at: datetime


class TicketReplyRequest(CamelModel):
    message: str | None = None


class TicketStatusUpdate(CamelModel):
    status: str | None = None
