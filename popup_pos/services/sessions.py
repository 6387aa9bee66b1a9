"""Signed session credentials carried in an HTTP-only cookie.

A session binds one user to exactly one organization. Tokens are stateless:
there is no server-side revocation list, so logging out only clears the cookie
and a leaked token stays valid until it expires.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, URLSafeTimedSerializer

from popup_pos.core.config import (
    ORG_SELECTION_TICKET_MAX_AGE_SECONDS,
    SESSION_COOKIE_DOMAIN,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SAMESITE,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_SECONDS,
    SESSION_SECRET,
)

SESSION_SALT = "org-session"
ORG_SELECTION_SALT = "org-selection"


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    organization_id: int
    organization_slug: str


def _serializer(salt: str) -> URLSafeTimedSerializer:
    if not SESSION_SECRET:
        raise RuntimeError("SESSION_SECRET is not configured.")
    return URLSafeTimedSerializer(SESSION_SECRET, salt=salt)


def _load(token: str, salt: str, max_age: int) -> Optional[dict[str, Any]]:
    # SignatureExpired and BadPayload are both BadSignature subclasses.
    try:
        payload = _serializer(salt).loads(token, max_age=max_age)
    except (BadSignature, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    exp = payload.get("exp")
    try:
        if exp is None or int(exp) < int(time.time()):
            return None
    except (TypeError, ValueError):
        return None
    return payload


def issue_session(user_id: int, organization_id: int, organization_slug: str) -> str:
    payload = {
        "user_id": int(user_id),
        "organization_id": int(organization_id),
        "organization_slug": organization_slug,
        "exp": int(time.time()) + SESSION_MAX_AGE_SECONDS,
    }
    return _serializer(SESSION_SALT).dumps(payload)


def verify_session(token: str | None) -> Optional[SessionClaims]:
    if not token:
        return None
    payload = _load(token, SESSION_SALT, SESSION_MAX_AGE_SECONDS)
    if payload is None:
        return None

    user_id = payload.get("user_id")
    organization_id = payload.get("organization_id")
    organization_slug = payload.get("organization_slug")
    if not isinstance(user_id, int) or not isinstance(organization_id, int):
        return None
    if not isinstance(organization_slug, str) or not organization_slug:
        return None
    return SessionClaims(
        user_id=user_id,
        organization_id=organization_id,
        organization_slug=organization_slug,
    )


def read_session(request: Request) -> Optional[SessionClaims]:
    return verify_session(request.cookies.get(SESSION_COOKIE_NAME))


def issue_org_selection_ticket(user_id: int) -> str:
    payload = {
        "user_id": int(user_id),
        "exp": int(time.time()) + ORG_SELECTION_TICKET_MAX_AGE_SECONDS,
    }
    return _serializer(ORG_SELECTION_SALT).dumps(payload)


def verify_org_selection_ticket(ticket: str | None) -> Optional[int]:
    if not ticket:
        return None
    payload = _load(ticket, ORG_SELECTION_SALT, ORG_SELECTION_TICKET_MAX_AGE_SECONDS)
    if payload is None:
        return None
    user_id = payload.get("user_id")
    return user_id if isinstance(user_id, int) else None


def build_session_cookie_options() -> dict[str, Any]:
    return {
        "domain": SESSION_COOKIE_DOMAIN,
        "httponly": True,
        "samesite": SESSION_COOKIE_SAMESITE,
        "path": "/",
        "secure": SESSION_COOKIE_SECURE,
    }


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        **build_session_cookie_options(),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        **build_session_cookie_options(),
    )


def start_session(response: Response, user_id: int, organization_id: int, organization_slug: str) -> str:
    token = issue_session(user_id, organization_id, organization_slug)
    set_session_cookie(response, token)
    return token
