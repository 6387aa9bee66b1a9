from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from popup_pos.services.sessions import read_session

logger = logging.getLogger(__name__)


class GateDecision(str, Enum):
    PUBLIC = "public"
    API = "api"
    PAGE = "page"


def classify_request(method: str, path: str) -> tuple[GateDecision, Optional[str]]:
    """Return how a request is protected and the organization slug it targets."""
    parts = [part for part in path.split("/") if part]
    method = method.upper()

    if len(parts) >= 3 and parts[0] == "api":
        org, section = parts[1], parts[2]
        if section == "admin":
            return GateDecision.API, org
        if section == "orders":
            # Placing an order is public; listing, clearing and status changes are staff-only.
            if len(parts) == 3 and method == "POST":
                return GateDecision.PUBLIC, org
            return GateDecision.API, org
        return GateDecision.PUBLIC, org

    if len(parts) >= 2 and parts[0] != "api" and parts[1] in {"admin", "orders"}:
        return GateDecision.PAGE, parts[0]

    return GateDecision.PUBLIC, None


class AuthorizationGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.session_claims = None
        decision, org = classify_request(request.method, request.url.path)

        claims = read_session(request)
        request.state.session_claims = claims

        if decision is GateDecision.PUBLIC or request.method == "OPTIONS":
            return await call_next(request)

        if claims is not None and claims.organization_slug == org:
            return await call_next(request)

        logger.warning(
            "[GATE] access denied method=%s path=%s reason=%s",
            request.method,
            request.url.path,
            "missing_session" if claims is None else "organization_mismatch",
        )
        if decision is GateDecision.PAGE:
            return RedirectResponse(url=f"/{org}/login", status_code=303)
        return JSONResponse(status_code=401, content={"detail": "Unauthorized", "code": "UNAUTHORIZED"})
