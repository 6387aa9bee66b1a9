"""Pricing and order placement.

The cart submitted by a customer is untrusted: only item ids, option ids and
quantities are read from it. Prices and names come from the catalog and are
snapshotted onto the order rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy.orm import Session

from popup_pos.core.errors import ValidationError
from popup_pos.core.limits import MAX_DB_INT, MAX_QUANTITY, fits_db_int
from popup_pos.models.menu_item import MenuItem
from popup_pos.models.modifier_option import ModifierOption
from popup_pos.models.order import STATUS_RECEIVED, Order
from popup_pos.models.order_item import OrderItem
from popup_pos.models.order_item_modifier import OrderItemModifier
from popup_pos.repositories.menu_repo import MenuItemRepository
from popup_pos.repositories.order_repo import OrderRepository
from popup_pos.schemas.orders import OrderLineRequest
from popup_pos.services import tenant_directory

logger = logging.getLogger(__name__)

CUSTOMER_NAME_MAX_LENGTH = 100


@dataclass
class PricedLine:
    menu_item: MenuItem
    quantity: int
    options: list[ModifierOption] = field(default_factory=list)

    @property
    def unit_price_cents(self) -> int:
        return self.menu_item.price_cents + sum(option.price_adjustment_cents for option in self.options)

    @property
    def subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity


def _normalize_customer_name(customer_name: str | None) -> str:
    name = (customer_name or "").strip()
    if not name:
        raise ValidationError("Customer name is required")
    if len(name) > CUSTOMER_NAME_MAX_LENGTH:
        raise ValidationError(f"Customer name must be at most {CUSTOMER_NAME_MAX_LENGTH} characters")
    return name


def price_lines(
    menu_repo: MenuItemRepository,
    organization_id: int,
    requested_items: Iterable[OrderLineRequest],
) -> list[PricedLine]:
    lines = list(requested_items)
    if not lines:
        raise ValidationError("Order must contain at least one item")

    for line in lines:
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
            raise ValidationError("Quantity must be a positive integer")
        if line.quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}")

    # out-of-range ids match no row and are reported as unknown below
    item_ids = {line.menu_item_id for line in lines if fits_db_int(line.menu_item_id)}
    option_ids = {
        selection.option_id
        for line in lines
        for selection in line.modifiers
        if fits_db_int(selection.option_id)
    }

    menu_items = menu_repo.load_orderable_items(organization_id, item_ids)
    options = menu_repo.load_options_for_items(organization_id, menu_items.keys(), option_ids)

    priced: list[PricedLine] = []
    for line in lines:
        menu_item = menu_items.get(line.menu_item_id)
        if menu_item is None:
            raise ValidationError("Invalid or unavailable menu item")

        selected: list[ModifierOption] = []
        seen: set[int] = set()
        for selection in line.modifiers:
            option = options.get(selection.option_id)
            if option is None or option.modifier.menu_item_id != menu_item.id:
                raise ValidationError("Invalid modifier option")
            if option.id in seen:
                raise ValidationError("Modifier option selected more than once")
            seen.add(option.id)
            selected.append(option)

        priced_line = PricedLine(menu_item=menu_item, quantity=line.quantity, options=selected)
        if priced_line.unit_price_cents < 0:
            raise ValidationError("Item price cannot be negative")
        if priced_line.unit_price_cents > MAX_DB_INT or priced_line.subtotal_cents > MAX_DB_INT:
            raise ValidationError("Order total is too large")
        priced.append(priced_line)

    if sum(line.subtotal_cents for line in priced) > MAX_DB_INT:
        raise ValidationError("Order total is too large")

    return priced


def _build_order(organization_id: int, number: int, customer_name: str, lines: list[PricedLine]) -> Order:
    order = Order(
        organization_id=organization_id,
        number=number,
        customer_name=customer_name,
        status=STATUS_RECEIVED,
        total_cents=sum(line.subtotal_cents for line in lines),
    )
    for line in lines:
        order.items.append(
            OrderItem(
                menu_item_id=line.menu_item.id,
                name=line.menu_item.name,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                modifiers=[
                    OrderItemModifier(
                        modifier_option_id=option.id,
                        modifier_name=option.modifier.name,
                        name=option.name,
                        price_adjustment_cents=option.price_adjustment_cents,
                    )
                    for option in line.options
                ],
            )
        )
    return order


def place_order(
    db: Session,
    org_slug: str,
    customer_name: str | None,
    requested_items: Iterable[OrderLineRequest],
) -> Order:
    organization = tenant_directory.get_organization(db, org_slug)
    name = _normalize_customer_name(customer_name)
    lines = price_lines(MenuItemRepository(db), organization.id, requested_items)

    order_repo = OrderRepository(db)
    try:
        number = order_repo.next_order_number(organization.id)
        order = order_repo.add(_build_order(organization.id, number, name, lines))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[ORDERS] failed to persist order organization_id=%s", organization.id)
        raise

    db.refresh(order)
    logger.info(
        "[ORDERS] order placed organization_id=%s order_id=%s number=%s total_cents=%s items=%s",
        organization.id,
        order.id,
        order.number,
        order.total_cents,
        len(lines),
    )
    return order
