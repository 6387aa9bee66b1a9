"""Reusable seed data for backend test scenarios."""

from __future__ import annotations

from sqlalchemy.orm import Session

from popup_pos.models.membership import ROLE_OWNER, Membership
from popup_pos.models.menu_item import MenuItem
from popup_pos.models.modifier import Modifier
from popup_pos.models.modifier_option import ModifierOption
from popup_pos.models.organization import Organization
from popup_pos.models.user import User
from popup_pos.services.passwords import hash_password

DEFAULT_PASSWORD = "password123"

LATTE_PAYLOAD = {
    "name": "Latte",
    "description": "Espresso with steamed milk",
    "price_cents": 450,
    "allergens": "milk",
    "available": True,
    "modifiers": [
        {
            "name": "Size",
            "options": [
                {"name": "Small", "price_adjustment_cents": 0},
                {"name": "Large", "price_adjustment_cents": 100},
            ],
        },
        {
            "name": "Milk",
            "options": [
                {"name": "Whole", "price_adjustment_cents": 0},
                {"name": "Oat", "price_adjustment_cents": 60},
            ],
        },
    ],
}


def seed_organization(
    db: Session,
    slug: str,
    name: str,
    username: str,
    password: str = DEFAULT_PASSWORD,
) -> tuple[Organization, User]:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        user = User(username=username, password_hash=hash_password(password))
        db.add(user)
    organization = Organization(name=name, slug=slug)
    organization.memberships.append(Membership(user=user, role=ROLE_OWNER))
    db.add(organization)
    db.commit()
    db.refresh(organization)
    db.refresh(user)
    return organization, user


def seed_menu_item(
    db: Session,
    organization: Organization,
    name: str,
    price_cents: int,
    *,
    available: bool = True,
    modifiers: dict[str, list[tuple[str, int]]] | None = None,
) -> MenuItem:
    item = MenuItem(
        organization_id=organization.id,
        name=name,
        price_cents=price_cents,
        available=available,
    )
    for position, (modifier_name, options) in enumerate((modifiers or {}).items()):
        item.modifiers.append(
            Modifier(
                name=modifier_name,
                position=position,
                options=[
                    ModifierOption(name=option_name, price_adjustment_cents=adjustment, position=option_position)
                    for option_position, (option_name, adjustment) in enumerate(options)
                ],
            )
        )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def option_id(item: MenuItem, modifier_name: str, option_name: str) -> int:
    for modifier in item.modifiers:
        if modifier.name != modifier_name:
            continue
        for option in modifier.options:
            if option.name == option_name:
                return option.id
    raise KeyError(f"{modifier_name}/{option_name}")


def login(client, slug: str, username: str, password: str = DEFAULT_PASSWORD):
    response = client.post(f"/api/{slug}/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response
