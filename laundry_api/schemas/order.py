"""Order schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from laundry_api.db.enums import DeliveryClass, OrderStatus, ServiceType
from laundry_api.schemas.common import CamelModel
from laundry_api.schemas.user import OwnerSummary


class OrderCreate(CamelModel):
    """
    Customer pickup request.

    ``service`` and ``delivery`` are validated by the order service so that
    the error names the allowed set. Any ``status`` sent by the client is
    ignored; new orders always start Pending. Optional fields may be omitted
    or null.
    """
    service: str | None = None
    pickup_address: str | None = None
    phone: str | None = None
    notes: str | None = None
    cloth_types: list[str | None] | None = None
    pickup_date: str | None = None
    pickup_time: str | None = None
    delivery: str | None = None
    lat: float | None = None
    lng: float | None = None


class OrderRead(CamelModel):
    id: UUID
    order_number: int
    user_id: UUID
    service: ServiceType
    cloth_types: list[str]
    pickup_address: str
    lat: float | None = None
    lng: float | None = None
    phone: str
    notes: str
    pickup_date: str
    pickup_time: str
    delivery: DeliveryClass
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class AdminOrderRead(OrderRead):
    user: OwnerSummary | None = Field(default=None, validation_alias="owner")


class OrderStatusUpdate(CamelModel):
    status: str | None = None


class OrderStatusChangeRead(CamelModel):
    id: int
    order_id: UUID
    from_status: OrderStatus
    to_status: OrderStatus
    changed_by_user_id: UUID | None = None
    changed_at: datetime


class OrderStats(CamelModel):
    total: int
    pending: int
    in_progress: int
    delivering: int
    completed: int
