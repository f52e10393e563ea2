"""Pickup order lifecycle: creation, customer self-service, admin status control."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from laundry_api.core.config import settings
from laundry_api.core.errors import (
    InvalidStatusError,
    InvalidStatusTransitionError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from laundry_api.db.enums import (
    DEFAULT_DELIVERY_CLASS,
    DeliveryClass,
    OrderStatus,
    ServiceType,
)
from laundry_api.db.models import Order, OrderStatusChange
from laundry_api.schemas.order import OrderCreate, OrderStats
from laundry_api.services import admin_events, sequence_service
from laundry_api.services.admin_events import AdminEvent
from laundry_api.services.order_status import (
    CANONICAL_ORDER_STATUSES,
    Unrecognized,
    is_backward,
    normalize_order_status,
)
from laundry_api.services.store import commit_or_raise


logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "Order not found"


def _parse_service(value: str | None) -> ServiceType:
    allowed = [s.value for s in ServiceType]
    if not value or not value.strip():
        raise ValidationError("Service is required", field="service", allowed=allowed)
    try:
        return ServiceType(value.strip())
    except ValueError:
        raise ValidationError(
            f"Service must be one of: {', '.join(allowed)}",
            field="service",
            allowed=allowed,
        )


def _parse_delivery(value: str | None) -> DeliveryClass:
    if not value:
        return DEFAULT_DELIVERY_CLASS
    try:
        return DeliveryClass(value.strip().lower())
    except ValueError:
        allowed = [d.value for d in DeliveryClass]
        raise ValidationError(
            f"Delivery must be one of: {', '.join(allowed)}",
            field="delivery",
            allowed=allowed,
        )


def _deleted_payload(order: Order) -> dict:
    return {"id": str(order.id), "orderNumber": order.order_number}


# =============================================================================
# Customer operations
# =============================================================================

def create_order(db: Session, owner_id: UUID, data: OrderCreate) -> Order:
    """
    Create a Pending order for ``owner_id`` and announce it to admins.

    The order number comes from the shared ``orderNumber`` sequence. If the
    sequence cannot be advanced the whole request fails; no order is ever
    stored without a number.
    """
    service = _parse_service(data.service)
    delivery = _parse_delivery(data.delivery)

    try:
        order_number = sequence_service.next_value(db, sequence_service.ORDER_NUMBER_SEQUENCE)
        order = Order(
            order_number=order_number,
            user_id=owner_id,
            service=service,
            cloth_types=[c.strip() for c in (data.cloth_types or []) if c and c.strip()],
            pickup_address=data.pickup_address or "",
            lat=data.lat,
            lng=data.lng,
            phone=data.phone or "",
            notes=data.notes or "",
            pickup_date=data.pickup_date or "",
            pickup_time=data.pickup_time or "",
            delivery=delivery,
            status=OrderStatus.PENDING,
        )
        db.add(order)
        db.commit()
    except StoreUnavailableError:
        db.rollback()
        raise
    except IntegrityError as exc:
        # Only the owner foreign key can fail here
        db.rollback()
        raise NotFoundError("User not found") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Order creation failed", extra={"user_id": str(owner_id)})
        raise StoreUnavailableError("Failed to create order") from exc

    db.refresh(order)
    logger.info(
        "Order created",
        extra={"order_number": order.order_number, "user_id": str(owner_id)},
    )
    admin_events.publish(AdminEvent.NEW_ORDER, admin_events.order_payload(order))
    return order


def list_own_orders(db: Session, owner_id: UUID) -> list[Order]:
    """Caller's own orders, newest first."""
    stmt = (
        select(Order)
        .where(Order.user_id == owner_id)
        .order_by(Order.created_at.desc(), Order.order_number.desc())
    )
    return list(db.scalars(stmt).all())


def cancel_order(db: Session, owner_id: UUID, order_id: UUID) -> None:
    """
    Delete one of the caller's own orders.

    Someone else's order is reported exactly like a missing one.
    """
    order = db.scalars(
        select(Order).where(Order.id == order_id, Order.user_id == owner_id)
    ).first()
    if not order:
        raise NotFoundError(ORDER_NOT_FOUND)

    payload = _deleted_payload(order)
    db.delete(order)
    commit_or_raise(db, "Failed to cancel order")
    logger.info("Order canceled by owner", extra={"order_number": payload["orderNumber"]})
    admin_events.publish(AdminEvent.ORDER_DELETED, payload)


# =============================================================================
# Admin operations
# =============================================================================

def get_order(db: Session, order_id: UUID) -> Order:
    order = db.get(Order, order_id)
    if not order:
        raise NotFoundError(ORDER_NOT_FOUND)
    return order


def list_all_orders(db: Session) -> list[Order]:
    """Every order, newest first, with owner summary loaded."""
    stmt = (
        select(Order)
        .options(selectinload(Order.owner))
        .order_by(Order.created_at.desc(), Order.order_number.desc())
    )
    return list(db.scalars(stmt).all())


def set_status(
    db: Session,
    order_id: UUID,
    requested: str | None,
    *,
    changed_by: UUID | None = None,
) -> Order:
    """
    Move an order to the status named by ``requested`` (aliases allowed).

    Operator override is the default: any canonical status may be set from
    any other. With ORDER_STATUS_FORWARD_ONLY enabled, moves back down the
    Pending -> In Progress -> Delivering -> Completed sequence are rejected.
    """
    target = normalize_order_status(requested)
    if isinstance(target, Unrecognized):
        raise InvalidStatusError(CANONICAL_ORDER_STATUSES)

    order = get_order(db, order_id)
    current = order.status

    if is_backward(current, target):
        if settings.ORDER_STATUS_FORWARD_ONLY:
            raise InvalidStatusTransitionError(
                f"Cannot move order from {current.value} back to {target.value}",
                from_status=current.value,
                to_status=target.value,
            )
        logger.warning(
            "Order status moved backward by operator override",
            extra={
                "order_number": order.order_number,
                "from_status": current.value,
                "to_status": target.value,
            },
        )

    order.status = target
    db.add(
        OrderStatusChange(
            order_id=order.id,
            from_status=current,
            to_status=target,
            changed_by_user_id=changed_by,
        )
    )
    commit_or_raise(db, "Failed to update order status")
    db.refresh(order)

    admin_events.publish(AdminEvent.ORDER_UPDATED, admin_events.order_payload(order))
    return order


def list_status_changes(db: Session, order_id: UUID) -> list[OrderStatusChange]:
    get_order(db, order_id)
    stmt = (
        select(OrderStatusChange)
        .where(OrderStatusChange.order_id == order_id)
        .order_by(OrderStatusChange.id)
    )
    return list(db.scalars(stmt).all())


def delete_order(db: Session, order_id: UUID) -> None:
    """Admin hard delete."""
    order = get_order(db, order_id)
    payload = _deleted_payload(order)
    db.delete(order)
    commit_or_raise(db, "Failed to delete order")
    logger.info("Order deleted by admin", extra={"order_number": payload["orderNumber"]})
    admin_events.publish(AdminEvent.ORDER_DELETED, payload)


def order_stats(db: Session) -> OrderStats:
    """Order counts per status for the admin dashboard."""
    rows = db.execute(select(Order.status, func.count()).group_by(Order.status)).all()
    counts = {status: count for status, count in rows}
    return OrderStats(
        total=sum(counts.values()),
        pending=counts.get(OrderStatus.PENDING, 0),
        in_progress=counts.get(OrderStatus.IN_PROGRESS, 0),
        delivering=counts.get(OrderStatus.DELIVERING, 0),
        completed=counts.get(OrderStatus.COMPLETED, 0),
    )
