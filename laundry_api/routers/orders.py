"""Customer order endpoints. Every query is scoped to the caller."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from laundry_api.core.deps import get_current_claims, get_db
from laundry_api.schemas.auth import TokenClaims
from laundry_api.schemas.common import MessageResponse
from laundry_api.schemas.order import OrderCreate, OrderRead
from laundry_api.services import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return order_service.create_order(db, claims.user_id, body)


@router.get("", response_model=list[OrderRead])
def list_orders(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return order_service.list_own_orders(db, claims.user_id)


@router.delete("/{order_id}", response_model=MessageResponse)
def cancel_order(
    order_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    order_service.cancel_order(db, claims.user_id, order_id)
    return MessageResponse(message="Order canceled")
