"""Admin endpoints: order control, user roles and dashboard counts."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from laundry_api.core.deps import get_db, require_admin
from laundry_api.core.websocket import manager
from laundry_api.db.enums import UserRole
from laundry_api.schemas.auth import TokenClaims
from laundry_api.schemas.common import MessageResponse
from laundry_api.schemas.order import (
    AdminOrderRead,
    OrderRead,
    OrderStats,
    OrderStatusChangeRead,
    OrderStatusUpdate,
)
from laundry_api.schemas.user import RoleUpdateRequest, UserRead
from laundry_api.services import order_service, user_service

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

# Close code sent to admin sockets of a user who lost the admin role
WS_ROLE_REVOKED = 4003


# =============================================================================
# Orders
# =============================================================================

@router.get("/orders", response_model=list[AdminOrderRead])
def list_orders(db: Session = Depends(get_db)):
    """All orders, newest first, each with its owner's contact summary."""
    return order_service.list_all_orders(db)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    claims: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Set an order's status; common aliases such as "delivered" are accepted."""
    return order_service.set_status(db, order_id, body.status, changed_by=claims.user_id)


@router.get("/orders/{order_id}/history", response_model=list[OrderStatusChangeRead])
def order_history(order_id: UUID, db: Session = Depends(get_db)):
    return order_service.list_status_changes(db, order_id)


@router.delete("/orders/{order_id}", response_model=MessageResponse)
def delete_order(order_id: UUID, db: Session = Depends(get_db)):
    order_service.delete_order(db, order_id)
    return MessageResponse(message="Order deleted")


@router.get("/stats", response_model=OrderStats)
def stats(db: Session = Depends(get_db)):
    return order_service.order_stats(db)


# =============================================================================
# Users
# =============================================================================

@router.get("/users", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.patch("/users/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: UUID,
    body: RoleUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    Promote or demote a user.

    Tokens are not revoked on demotion; the demoted user's open admin
    sockets are closed and any new handshake is refused once their next
    token carries the customer role.
    """
    user, previous = user_service.set_role(db, user_id, body.role)
    if previous == UserRole.ADMIN and user.role != UserRole.ADMIN:
        await manager.close_user(user.id, code=WS_ROLE_REVOKED, reason="Admin role revoked")
    return user
