from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.core.errors import UnauthorizedError
from popup_pos.deps import require_org_session
from popup_pos.schemas.auth import LoginRequest, MeResponse
from popup_pos.services import tenant_directory
from popup_pos.services.registration import authenticate_member
from popup_pos.services.sessions import SessionClaims, clear_session_cookie, start_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/{org}/auth", tags=["org-auth"])


@router.post("/login")
def login(org: str, payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    membership = authenticate_member(db, org, payload.username, payload.password)
    organization = membership.organization
    start_session(response, membership.user_id, organization.id, organization.slug)
    logger.info("[AUTH] login ok organization_id=%s user_id=%s", organization.id, membership.user_id)
    return {"success": True}


@router.post("/logout")
def logout(org: str, response: Response):
    clear_session_cookie(response)
    return {"success": True}


@router.get("/me", response_model=MeResponse)
def me(claims: SessionClaims = Depends(require_org_session), db: Session = Depends(get_db)):
    membership = tenant_directory.get_membership(db, claims.user_id, claims.organization_id)
    if membership is None:
        raise UnauthorizedError("Unauthorized")
    organization = membership.organization
    return MeResponse(
        id=membership.user.id,
        username=membership.user.username,
        role=membership.role,
        organization={"id": organization.id, "slug": organization.slug, "name": organization.name},
    )
