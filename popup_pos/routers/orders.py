from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.deps import require_org_session
from popup_pos.schemas.orders import OrderResponse, OrderStatusUpdate, PlaceOrderRequest, order_to_dict
from popup_pos.services import order_lifecycle
from popup_pos.services.orders import place_order
from popup_pos.services.sessions import SessionClaims

router = APIRouter(prefix="/api/{org}/orders", tags=["orders"])


class ClearOrdersResponse(BaseModel):
    success: bool = True
    deleted: int


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(org: str, payload: PlaceOrderRequest, db: Session = Depends(get_db)):
    order = place_order(db, org, payload.customer_name, payload.items)
    return order_to_dict(order)


@router.get("", response_model=list[OrderResponse])
def list_orders(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    orders = order_lifecycle.list_orders(db, claims.organization_id, status=status_filter)
    return [order_to_dict(order) for order in orders]


@router.delete("", response_model=ClearOrdersResponse)
def clear_orders(
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    deleted = order_lifecycle.clear_all(db, claims.organization_id)
    return ClearOrdersResponse(deleted=deleted)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    order = order_lifecycle.update_status(db, claims.organization_id, order_id, payload.status)
    return order_to_dict(order)
