from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator, model_validator

from popup_pos.core.limits import MAX_PRICE_CENTS
from popup_pos.models.menu_item import MenuItem

URL_PATTERN = re.compile(r"^https?://\S+$")


def _strip_required(value: str) -> str:
    candidate = value.strip()
    if not candidate:
        raise ValueError("must not be blank")
    return candidate


def _validate_image_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    candidate = value.strip()
    if not candidate:
        return None
    if not URL_PATTERN.match(candidate):
        raise ValueError("Invalid URL. Use http:// or https://")
    return candidate


class ModifierOptionPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    price_adjustment_cents: StrictInt = Field(default=0, ge=-MAX_PRICE_CENTS, le=MAX_PRICE_CENTS)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_required(value)


class ModifierPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    options: list[ModifierOptionPayload] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_required(value)


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = None
    price_cents: StrictInt = Field(..., ge=0, le=MAX_PRICE_CENTS)
    allergens: Optional[str] = Field(default=None, max_length=500)
    available: StrictBool = True
    modifiers: list[ModifierPayload] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        return _validate_image_url(value)


class MenuItemUpdate(BaseModel):
    """Optional-field update: only fields present in the request are applied.

    ``modifiers``, when present, replaces the whole modifier set of the item.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = None
    price_cents: Optional[StrictInt] = Field(default=None, ge=0, le=MAX_PRICE_CENTS)
    allergens: Optional[str] = Field(default=None, max_length=500)
    available: Optional[StrictBool] = None
    modifiers: Optional[list[ModifierPayload]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _strip_required(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        return _validate_image_url(value)

    @model_validator(mode="after")
    def reject_null_for_required_fields(self) -> "MenuItemUpdate":
        for field_name in ("name", "price_cents", "available", "modifiers"):
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


class ModifierOptionResponse(BaseModel):
    id: int
    name: str
    price_adjustment_cents: int


class ModifierResponse(BaseModel):
    id: int
    name: str
    options: list[ModifierOptionResponse]


class MenuItemResponse(BaseModel):
    id: int
    organization_id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price_cents: int
    allergens: Optional[str] = None
    available: bool
    created_at: Optional[str] = None
    modifiers: list[ModifierResponse] = Field(default_factory=list)


def menu_item_to_dict(item: MenuItem) -> dict:
    return {
        "id": item.id,
        "organization_id": item.organization_id,
        "name": item.name,
        "description": item.description,
        "image_url": item.image_url,
        "price_cents": item.price_cents,
        "allergens": item.allergens,
        "available": item.available,
        "created_at": item.created_at.isoformat() if item.created_at else None,
        "modifiers": [
            {
                "id": modifier.id,
                "name": modifier.name,
                "options": [
                    {
                        "id": option.id,
                        "name": option.name,
                        "price_adjustment_cents": option.price_adjustment_cents,
                    }
                    for option in modifier.options
                ],
            }
            for modifier in item.modifiers
        ],
    }
