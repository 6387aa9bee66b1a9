"""Error taxonomy shared by services, repositories and routers.

Services raise these; the handlers registered by ``register_exception_handlers``
turn them into ``{"detail": ..., "code": ...}`` JSON responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PopupPosError(Exception):
    """Base exception for the ordering backend."""

    def __init__(self, code: str, message: str, status_code: int = 500):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(PopupPosError):
    """Missing entity, or one owned by another organization."""

    def __init__(self, resource: str):
        super().__init__("NOT_FOUND", f"{resource} not found", status_code=404)


class UnauthorizedError(PopupPosError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__("UNAUTHORIZED", message, status_code=401)


class ValidationError(PopupPosError):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(code, message, status_code=400)


class InvalidContentTypeError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, code="INVALID_CONTENT_TYPE")


class ConflictError(PopupPosError):
    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PopupPosError)
    async def popup_pos_error_handler(request: Request, exc: PopupPosError):
        if isinstance(exc, UnauthorizedError):
            logger.warning(
                "[GATE] access denied method=%s path=%s reason=%s",
                request.method,
                request.url.path,
                exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Invalid input",
                "code": "VALIDATION_ERROR",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error method=%s path=%s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "code": "INTERNAL"},
        )
