from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from popup_pos.core.errors import ValidationError
from popup_pos.models.order import ORDER_STATUSES, Order
from popup_pos.repositories.order_repo import OrderRepository

logger = logging.getLogger(__name__)


def validate_status(status: Optional[str]) -> str:
    """Return ``status`` unchanged if it is one of the exact, uppercase names."""
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status. Allowed: {', '.join(ORDER_STATUSES)}")
    return status


def list_orders(db: Session, organization_id: int, status: Optional[str] = None) -> list[Order]:
    status_filter = validate_status(status) if status else None
    return OrderRepository(db).list(organization_id, status=status_filter)


def update_status(db: Session, organization_id: int, order_id: int, status: str) -> Order:
    """Move an order to ``status``.

    Ownership is checked before the target status, so a foreign order id
    always reads as not found.
    """
    order = OrderRepository(db).get(organization_id, order_id)
    target = validate_status(status)

    if order.status == target:
        return order

    previous = order.status
    order.status = target
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(order)
    logger.info(
        "[ORDERS] status changed organization_id=%s order_id=%s from=%s to=%s",
        organization_id,
        order.id,
        previous,
        target,
    )
    return order


def clear_all(db: Session, organization_id: int) -> int:
    try:
        deleted = OrderRepository(db).delete_all(organization_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("[ORDERS] orders cleared organization_id=%s count=%s", organization_id, deleted)
    return deleted
