"""
Error taxonomy shared by every service, and the FastAPI handlers that
turn it into HTTP responses.

Services raise one of four kinds; the boundary maps them 1:1:

    InvalidInputError  → 400
    NotFoundError      → 404
    ConflictError      → 409
    InternalError      → 500

500 responses never carry the underlying cause; it is logged here
instead.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class InvalidInputError(ServiceError):
    """Missing or non-numeric identifier, malformed payload."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid input", code: str = "INVALID_INPUT", details: dict[str, Any] | None = None):
        super().__init__(message, code, details)


class NotFoundError(ServiceError):
    """The targeted record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND", details: dict[str, Any] | None = None):
        super().__init__(message, code, details)


class ConflictError(ServiceError):
    """A uniqueness constraint rejected the write."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Already exists", code: str = "CONFLICT", details: dict[str, Any] | None = None):
        super().__init__(message, code, details)


class InternalError(ServiceError):
    """Store or connectivity failure.  Never retried by the services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal error", code: str = "INTERNAL_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message, code, details)


# ── Handlers ─────────────────────────────────────────────────────────


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": "An internal error occurred"},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message, "details": exc.details},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Body / path validation failures are client errors (400), not 422."""
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "INVALID_INPUT",
            "message": "Malformed request",
            "details": {"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
