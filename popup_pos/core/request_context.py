"""Per-request identity carried into every log line.

One immutable :class:`RequestContext` lives in a single context variable. The
observability middleware binds the request id when a request starts. Once a
session has been verified for an organization, the tenant fields are layered
on top, so log lines written by services name the tenant they acted for.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: Optional[str] = None
    organization_id: Optional[int] = None
    organization_slug: Optional[str] = None
    user_id: Optional[int] = None

    def log_fields(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "organization_id": self.organization_id,
            "organization_slug": self.organization_slug,
            "user_id": self.user_id,
        }


_EMPTY = RequestContext()
_CURRENT: ContextVar[RequestContext] = ContextVar("popup_pos_request", default=_EMPTY)


def current_request_context() -> RequestContext:
    return _CURRENT.get()


def begin_request(request_id: str) -> Token:
    """Start a fresh context for a request; pass the token to :func:`end_request`."""
    return _CURRENT.set(RequestContext(request_id=request_id))


def bind_tenant(organization_id: int, organization_slug: str, user_id: int) -> RequestContext:
    context = replace(
        _CURRENT.get(),
        organization_id=organization_id,
        organization_slug=organization_slug,
        user_id=user_id,
    )
    _CURRENT.set(context)
    return context


def end_request(token: Token) -> None:
    _CURRENT.reset(token)
