from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from popup_pos.models.menu_item import MenuItem
from popup_pos.repositories.menu_repo import MenuItemRepository
from popup_pos.schemas.catalog import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = ("name", "description", "image_url", "price_cents", "allergens", "available")


def list_available(db: Session, organization_id: int) -> list[MenuItem]:
    return MenuItemRepository(db).list_available(organization_id)


def list_all(db: Session, organization_id: int) -> list[MenuItem]:
    return MenuItemRepository(db).list_all(organization_id)


def create_item(db: Session, organization_id: int, payload: MenuItemCreate) -> MenuItem:
    repo = MenuItemRepository(db)
    fields = payload.model_dump(include=set(_SCALAR_FIELDS))
    try:
        item = repo.add(organization_id, **fields)
        repo.replace_modifiers(organization_id, item, payload.modifiers)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("[CATALOG] item created organization_id=%s item_id=%s", organization_id, item.id)
    return repo.get(organization_id, item.id)


def update_item(db: Session, organization_id: int, item_id: int, payload: MenuItemUpdate) -> MenuItem:
    """Apply only the fields present in ``payload``.

    A supplied ``modifiers`` list replaces every modifier and option of the
    item in the same transaction as the scalar changes.
    """
    repo = MenuItemRepository(db)
    item = repo.get(organization_id, item_id)
    changes = payload.model_dump(exclude_unset=True)
    modifiers = changes.pop("modifiers", None)

    try:
        for field_name, value in changes.items():
            setattr(item, field_name, value)
        if modifiers is not None:
            repo.replace_modifiers(organization_id, item, payload.modifiers or [])
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "[CATALOG] item updated organization_id=%s item_id=%s fields=%s modifiers_replaced=%s",
        organization_id,
        item_id,
        sorted(changes.keys()),
        modifiers is not None,
    )
    db.expire_all()
    return repo.get(organization_id, item_id)


def delete_item(db: Session, organization_id: int, item_id: int) -> None:
    repo = MenuItemRepository(db)
    try:
        repo.remove(organization_id, item_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("[CATALOG] item deleted organization_id=%s item_id=%s", organization_id, item_id)
