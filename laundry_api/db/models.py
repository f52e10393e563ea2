"""SQLAlchemy ORM models for users, orders, tickets and sequences."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry_api.db.base import Base
from laundry_api.db.enums import (
    DEFAULT_DELIVERY_CLASS,
    DEFAULT_ORDER_STATUS,
    DEFAULT_TICKET_STATUS,
    DeliveryClass,
    OrderStatus,
    ReplySender,
    ServiceType,
    TicketStatus,
    UserRole,
)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _enum_type(enum_cls, *, name: str) -> Enum:
    """Store str-enums by value in a portable VARCHAR column."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


# =============================================================================
# Users
# =============================================================================

class User(Base):
    """
    Customer or administrator account.

    ``phone`` is the primary contact handle and is stored digits-only.
    ``email`` is optional and stored lowercased.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        _enum_type(UserRole, name="user_role"),
        default=UserRole.CUSTOMER,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_now_utc, onupdate=_now_utc, nullable=False
    )

    orders: Mapped[list["Order"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )


class PasswordResetCode(Base):
    """Single live reset code per phone; the code itself is stored hashed."""
    __tablename__ = "password_reset_codes"

    phone: Mapped[str] = mapped_column(String(32), primary_key=True)
    code_hash: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


# =============================================================================
# Sequences
# =============================================================================

class SequenceCounter(Base):
    """
    Named monotonically increasing counter.

    Only ever mutated through an atomic upsert-increment
    (see services.sequence_service).
    """
    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# =============================================================================
# Orders
# =============================================================================

class Order(Base):
    """Pickup order placed by a customer."""
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_user_created", "user_id", "created_at"),
        Index("idx_orders_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    service: Mapped[ServiceType] = mapped_column(
        _enum_type(ServiceType, name="service_type"), nullable=False
    )
    cloth_types: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    pickup_address: Mapped[str] = mapped_column(Text, default="", nullable=False)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    phone: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    pickup_date: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    pickup_time: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    delivery: Mapped[DeliveryClass] = mapped_column(
        _enum_type(DeliveryClass, name="delivery_class"),
        default=DEFAULT_DELIVERY_CLASS,
        nullable=False,
    )
    status: Mapped[OrderStatus] = mapped_column(
        _enum_type(OrderStatus, name="order_status"),
        default=DEFAULT_ORDER_STATUS,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_now_utc, onupdate=_now_utc, nullable=False
    )

    owner: Mapped["User"] = relationship(back_populates="orders")
    status_changes: Mapped[list["OrderStatusChange"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderStatusChange.id",
    )


class OrderStatusChange(Base):
    """Append-only record of admin status updates on an order."""
    __tablename__ = "order_status_changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_status: Mapped[OrderStatus] = mapped_column(
        _enum_type(OrderStatus, name="order_status"), nullable=False
    )
    to_status: Mapped[OrderStatus] = mapped_column(
        _enum_type(OrderStatus, name="order_status"), nullable=False
    )
    changed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    changed_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)

    order: Mapped["Order"] = relationship(back_populates="status_changes")


# =============================================================================
# Support tickets
# =============================================================================

class Ticket(Base):
    """Support ticket opened from the public support widget."""
    __tablename__ = "tickets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mobile: Mapped[str] = mapped_column(String(32), nullable=False)
    order_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    issue: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TicketStatus] = mapped_column(
        _enum_type(TicketStatus, name="ticket_status"),
        default=DEFAULT_TICKET_STATUS,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_now_utc, onupdate=_now_utc, nullable=False
    )

    replies: Mapped[list["TicketReply"]] = relationship(
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TicketReply.id",
    )


class TicketReply(Base):
    """Append-only reply on a ticket."""
    __tablename__ = "ticket_replies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticket_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender: Mapped[ReplySender] = mapped_column(
        _enum_type(ReplySender, name="reply_sender"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)

    ticket: Mapped["Ticket"] = relationship(back_populates="replies")
