"""Organization-scoped access to menu items, modifiers and options.

Every method takes ``organization_id`` first. It must come from a verified
session or a resolved slug, never from the request body.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Query, Session, joinedload, selectinload

from popup_pos.core.errors import NotFoundError
from popup_pos.core.limits import fits_db_int
from popup_pos.models.menu_item import MenuItem
from popup_pos.models.modifier import Modifier
from popup_pos.models.modifier_option import ModifierOption
from popup_pos.schemas.catalog import ModifierPayload


class MenuItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, organization_id: int) -> Query:
        return (
            self.db.query(MenuItem)
            .options(selectinload(MenuItem.modifiers).selectinload(Modifier.options))
            .filter(MenuItem.organization_id == organization_id)
        )

    def list_available(self, organization_id: int) -> list[MenuItem]:
        return (
            self._scoped(organization_id)
            .filter(MenuItem.available.is_(True))
            .order_by(MenuItem.created_at.asc(), MenuItem.id.asc())
            .all()
        )

    def list_all(self, organization_id: int) -> list[MenuItem]:
        return self._scoped(organization_id).order_by(MenuItem.created_at.asc(), MenuItem.id.asc()).all()

    def get(self, organization_id: int, item_id: int) -> MenuItem:
        if not fits_db_int(item_id):
            raise NotFoundError("Menu item")
        item = self._scoped(organization_id).filter(MenuItem.id == item_id).first()
        if item is None:
            raise NotFoundError("Menu item")
        return item

    def add(self, organization_id: int, **fields) -> MenuItem:
        item = MenuItem(organization_id=organization_id, **fields)
        self.db.add(item)
        self.db.flush()
        return item

    def replace_modifiers(
        self, organization_id: int, item: MenuItem, modifiers: Iterable[ModifierPayload]
    ) -> None:
        if item.organization_id != organization_id:
            raise NotFoundError("Menu item")
        # delete-orphan cascade removes the previous modifiers and their options
        item.modifiers = []
        self.db.flush()
        item.modifiers = [
            Modifier(
                name=modifier.name,
                position=modifier_position,
                options=[
                    ModifierOption(
                        name=option.name,
                        price_adjustment_cents=option.price_adjustment_cents,
                        position=option_position,
                    )
                    for option_position, option in enumerate(modifier.options)
                ],
            )
            for modifier_position, modifier in enumerate(modifiers)
        ]
        self.db.flush()

    def remove(self, organization_id: int, item_id: int) -> None:
        item = self.get(organization_id, item_id)
        self.db.delete(item)
        self.db.flush()

    def load_orderable_items(self, organization_id: int, item_ids: Iterable[int]) -> dict[int, MenuItem]:
        ids = set(item_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(MenuItem)
            .filter(
                MenuItem.organization_id == organization_id,
                MenuItem.available.is_(True),
                MenuItem.id.in_(ids),
            )
            .all()
        )
        return {row.id: row for row in rows}

    def load_options_for_items(
        self,
        organization_id: int,
        item_ids: Iterable[int],
        option_ids: Iterable[int],
    ) -> dict[int, ModifierOption]:
        item_id_set = set(item_ids)
        option_id_set = set(option_ids)
        if not item_id_set or not option_id_set:
            return {}
        rows = (
            self.db.query(ModifierOption)
            .join(Modifier, Modifier.id == ModifierOption.modifier_id)
            .join(MenuItem, MenuItem.id == Modifier.menu_item_id)
            .options(joinedload(ModifierOption.modifier))
            .filter(
                MenuItem.organization_id == organization_id,
                MenuItem.id.in_(item_id_set),
                ModifierOption.id.in_(option_id_set),
            )
            .all()
        )
        return {row.id: row for row in rows}
