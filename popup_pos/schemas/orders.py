from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, StrictInt

from popup_pos.core.limits import MAX_QUANTITY
from popup_pos.models.order import Order


class OrderModifierSelection(BaseModel):
    option_id: int


class OrderLineRequest(BaseModel):
    """One cart line as submitted by the customer.

    Any price the client computed for display is not part of this model and is
    dropped on parse; pricing is always derived from the catalog.
    """

    menu_item_id: int
    quantity: StrictInt = Field(..., ge=1, le=MAX_QUANTITY)
    modifiers: list[OrderModifierSelection] = Field(default_factory=list)


class PlaceOrderRequest(BaseModel):
    customer_name: str = ""
    items: list[OrderLineRequest] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: str


class OrderItemModifierResponse(BaseModel):
    modifier_option_id: Optional[int] = None
    modifier_name: str
    name: str
    price_adjustment_cents: int


class OrderItemResponse(BaseModel):
    id: int
    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    unit_price_cents: int
    subtotal_cents: int
    modifiers: list[OrderItemModifierResponse]


class OrderResponse(BaseModel):
    id: int
    organization_id: int
    number: int
    customer_name: str
    status: str
    total_cents: int
    created_at: Optional[str] = None
    items: list[OrderItemResponse]


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "organization_id": order.organization_id,
        "number": order.number,
        "customer_name": order.customer_name,
        "status": order.status,
        "total_cents": order.total_cents,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "items": [
            {
                "id": item.id,
                "menu_item_id": item.menu_item_id,
                "name": item.name,
                "quantity": item.quantity,
                "unit_price_cents": item.unit_price_cents,
                "subtotal_cents": item.subtotal_cents,
                "modifiers": [
                    {
                        "modifier_option_id": modifier.modifier_option_id,
                        "modifier_name": modifier.modifier_name,
                        "name": modifier.name,
                        "price_adjustment_cents": modifier.price_adjustment_cents,
                    }
                    for modifier in item.modifiers
                ],
            }
            for item in order.items
        ],
    }
