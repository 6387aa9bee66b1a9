"""Organization-scoped access to orders."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.orm import Query, Session, selectinload

from popup_pos.core.errors import NotFoundError
from popup_pos.core.limits import fits_db_int
from popup_pos.models.order import Order
from popup_pos.models.order_item import OrderItem
from popup_pos.models.order_item_modifier import OrderItemModifier
from popup_pos.models.organization import Organization


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, organization_id: int) -> Query:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.modifiers))
            .filter(Order.organization_id == organization_id)
        )

    def list(self, organization_id: int, status: Optional[str] = None) -> list[Order]:
        query = self._scoped(organization_id)
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(desc(Order.created_at), desc(Order.id)).all()

    def get(self, organization_id: int, order_id: int) -> Order:
        if not fits_db_int(order_id):
            raise NotFoundError("Order")
        order = self._scoped(organization_id).filter(Order.id == order_id).first()
        if order is None:
            raise NotFoundError("Order")
        return order

    def next_order_number(self, organization_id: int) -> int:
        # The UPDATE holds the organization row lock until the surrounding
        # transaction ends, so concurrent orders are numbered one at a time.
        self.db.execute(
            update(Organization)
            .where(Organization.id == organization_id)
            .values(last_order_number=Organization.last_order_number + 1)
            .execution_options(synchronize_session=False)
        )
        number = self.db.execute(
            select(Organization.last_order_number).where(Organization.id == organization_id)
        ).scalar_one_or_none()
        if number is None:
            raise NotFoundError("Organization")
        return int(number)

    def add(self, order: Order) -> Order:
        if order.organization_id is None:
            raise ValueError("order must be scoped to an organization")
        self.db.add(order)
        self.db.flush()
        return order

    def delete_all(self, organization_id: int) -> int:
        order_ids = select(Order.id).where(Order.organization_id == organization_id)
        item_ids = select(OrderItem.id).where(OrderItem.order_id.in_(order_ids))

        self.db.execute(
            delete(OrderItemModifier)
            .where(OrderItemModifier.order_item_id.in_(item_ids))
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(OrderItem)
            .where(OrderItem.order_id.in_(order_ids))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(Order)
            .where(Order.organization_id == organization_id)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
