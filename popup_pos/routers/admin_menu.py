from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.deps import require_org_session
from popup_pos.schemas.catalog import MenuItemCreate, MenuItemResponse, MenuItemUpdate, menu_item_to_dict
from popup_pos.services import catalog
from popup_pos.services.sessions import SessionClaims

router = APIRouter(prefix="/api/{org}/admin/menu", tags=["admin-menu"])


class DeleteMenuItemResponse(BaseModel):
    success: bool = True


@router.get("", response_model=list[MenuItemResponse])
def list_menu_items(
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    return [menu_item_to_dict(item) for item in catalog.list_all(db, claims.organization_id)]


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    payload: MenuItemCreate,
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    item = catalog.create_item(db, claims.organization_id, payload)
    return menu_item_to_dict(item)


@router.patch("/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    item = catalog.update_item(db, claims.organization_id, item_id, payload)
    return menu_item_to_dict(item)


@router.delete("/{item_id}", response_model=DeleteMenuItemResponse)
def delete_menu_item(
    item_id: int,
    claims: SessionClaims = Depends(require_org_session),
    db: Session = Depends(get_db),
):
    catalog.delete_item(db, claims.organization_id, item_id)
    return DeleteMenuItemResponse()
