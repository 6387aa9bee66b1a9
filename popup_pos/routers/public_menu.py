from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.schemas.catalog import MenuItemResponse, menu_item_to_dict
from popup_pos.services import catalog, tenant_directory

router = APIRouter(prefix="/api/{org}", tags=["public-menu"])


class PublicOrganization(BaseModel):
    name: str
    checkout_message: Optional[str] = None


class PublicMenuResponse(BaseModel):
    organization: PublicOrganization
    menu_items: list[MenuItemResponse]


@router.get("/menu", response_model=PublicMenuResponse)
def get_public_menu(org: str, db: Session = Depends(get_db)):
    organization = tenant_directory.get_organization(db, org)
    items = catalog.list_available(db, organization.id)
    return {
        "organization": {
            "name": organization.name,
            "checkout_message": organization.checkout_message,
        },
        "menu_items": [menu_item_to_dict(item) for item in items],
    }
