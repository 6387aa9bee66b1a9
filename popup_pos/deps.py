# popup_pos/deps.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from popup_pos.core.errors import UnauthorizedError
from popup_pos.core.request_context import bind_tenant
from popup_pos.services.sessions import SessionClaims, read_session

logger = logging.getLogger(__name__)


def get_session_claims(request: Request) -> Optional[SessionClaims]:
    """Claims decoded by the gate middleware, or decoded here when it did not run."""
    claims = getattr(request.state, "session_claims", None)
    if claims is None:
        claims = read_session(request)
    return claims


def require_session(request: Request) -> SessionClaims:
    claims = get_session_claims(request)
    if claims is None:
        raise UnauthorizedError("Not authenticated")
    return claims


def require_org_session(org: str, request: Request) -> SessionClaims:
    """Admin handlers take their organization id only from here.

    A session issued for another organization is rejected exactly like a
    missing one.
    """
    claims = get_session_claims(request)
    if claims is None:
        raise UnauthorizedError("Unauthorized")
    if claims.organization_slug != org:
        logger.warning(
            "[GATE] organization mismatch session_org=%s path_org=%s user_id=%s",
            claims.organization_slug,
            org,
            claims.user_id,
        )
        raise UnauthorizedError("Unauthorized")

    bind_tenant(claims.organization_id, claims.organization_slug, claims.user_id)
    return claims
