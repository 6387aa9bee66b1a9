from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    org_name: str = Field(..., min_length=1, max_length=100)
    org_slug: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=100)


class SelectOrgRequest(BaseModel):
    org_id: int
    selection_ticket: Optional[str] = None


class OrganizationSummary(BaseModel):
    id: int
    slug: str
    name: str
    role: Optional[str] = None


class RegisterResponse(BaseModel):
    success: bool = True
    organization: OrganizationSummary


class GlobalLoginResponse(BaseModel):
    success: bool = True
    org_slug: Optional[str] = None
    orgs: Optional[list[OrganizationSummary]] = None
    needs_org_selection: bool = False
    selection_ticket: Optional[str] = None


class SelectOrgResponse(BaseModel):
    success: bool = True
    org_slug: str


class OrgListResponse(BaseModel):
    orgs: list[OrganizationSummary]
    current_org_id: int


class MeResponse(BaseModel):
    id: int
    username: str
    role: str
    organization: OrganizationSummary
