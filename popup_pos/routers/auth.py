from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from popup_pos.core.database import get_db
from popup_pos.core.errors import UnauthorizedError
from popup_pos.deps import get_session_claims, require_session
from popup_pos.models.membership import Membership
from popup_pos.schemas.auth import (
    GlobalLoginResponse,
    LoginRequest,
    OrganizationSummary,
    OrgListResponse,
    RegisterRequest,
    RegisterResponse,
    SelectOrgRequest,
    SelectOrgResponse,
)
from popup_pos.services import tenant_directory
from popup_pos.services.registration import authenticate, register_organization
from popup_pos.services.sessions import (
    SessionClaims,
    issue_org_selection_ticket,
    start_session,
    verify_org_selection_ticket,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _summary(membership: Membership) -> OrganizationSummary:
    return OrganizationSummary(
        id=membership.organization.id,
        slug=membership.organization.slug,
        name=membership.organization.name,
        role=membership.role,
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    organization = register_organization(
        db,
        org_name=payload.org_name,
        org_slug=payload.org_slug,
        username=payload.username,
        password=payload.password,
    )
    return RegisterResponse(
        organization=OrganizationSummary(id=organization.id, slug=organization.slug, name=organization.name)
    )


@router.post("/auth/login", response_model=GlobalLoginResponse, response_model_exclude_none=True)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Log in without an organization in the URL.

    With a single membership the session starts right away. With several,
    the caller gets the list plus a short-lived selection ticket to redeem at
    ``/api/auth/select-org``.
    """
    user = authenticate(db, payload.username, payload.password)
    memberships = tenant_directory.memberships_for_user(db, user.id)
    if not memberships:
        logger.warning("[AUTH] login without memberships user_id=%s", user.id)
        raise UnauthorizedError("Invalid credentials")

    if len(memberships) == 1:
        organization = memberships[0].organization
        start_session(response, user.id, organization.id, organization.slug)
        logger.info("[AUTH] login ok organization_id=%s user_id=%s", organization.id, user.id)
        return GlobalLoginResponse(org_slug=organization.slug)

    logger.info("[AUTH] login needs organization selection user_id=%s orgs=%s", user.id, len(memberships))
    return GlobalLoginResponse(
        orgs=[_summary(membership) for membership in memberships],
        needs_org_selection=True,
        selection_ticket=issue_org_selection_ticket(user.id),
    )


@router.post("/auth/select-org", response_model=SelectOrgResponse)
def select_org(
    payload: SelectOrgRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    claims = get_session_claims(request)
    user_id = claims.user_id if claims is not None else verify_org_selection_ticket(payload.selection_ticket)
    if user_id is None:
        raise UnauthorizedError("Not authenticated")

    membership = tenant_directory.get_membership(db, user_id, payload.org_id)
    if membership is None:
        logger.warning("[AUTH] organization selection denied user_id=%s org_id=%s", user_id, payload.org_id)
        raise UnauthorizedError("You don't have access to this organization")

    organization = membership.organization
    start_session(response, user_id, organization.id, organization.slug)
    return SelectOrgResponse(org_slug=organization.slug)


@router.get("/auth/orgs", response_model=OrgListResponse)
def list_orgs(claims: SessionClaims = Depends(require_session), db: Session = Depends(get_db)):
    memberships = tenant_directory.memberships_for_user(db, claims.user_id)
    return OrgListResponse(
        orgs=[_summary(membership) for membership in memberships],
        current_org_id=claims.organization_id,
    )
