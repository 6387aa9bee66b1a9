from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class OrganizationSettingsUpdate(BaseModel):
    checkout_message: Optional[str] = Field(default=None, max_length=500)


class OrganizationSettingsResponse(BaseModel):
    name: str
    slug: str
    checkout_message: Optional[str] = None
