from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from popup_pos.core.request_context import begin_request, bind_tenant, end_request

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = begin_request(request_id)

        status_code = 500
        response = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # handlers run in their own task, so tenant fields are re-read from the gate's claims
            claims = getattr(request.state, "session_claims", None)
            if claims is not None:
                bind_tenant(claims.organization_id, claims.organization_slug, claims.user_id)
            logger.info(
                "request completed",
                extra={
                    "endpoint": request.url.path,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            end_request(token)
