"""
Centralized error handlers for FastAPI.

Maps domain and integration errors to HTTP responses.
No stack traces or internal details are exposed to clients.
Every error response has the shape
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wagerbridge.domain.betting.errors import DomainError, ValidationError
from wagerbridge.domain.fantasy402.errors import ExternalServiceError

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502

DOMAIN_STATUS_CODES = {
    "INSUFFICIENT_FUNDS": HTTP_400,
    "BET_NOT_FOUND": HTTP_404,
    "AGENT_NOT_FOUND": HTTP_404,
    "BET_ALREADY_SETTLED": HTTP_409,
}


def error_body(
    code: str, message: str, details: Optional[Any] = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def _error_response(
    status_code: int, code: str, message: str, details: Optional[Any] = None
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(code, message, details))


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(_request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("Validation error on %s: %s", exc.field or "request", exc.message)
        details = {"field": exc.field} if exc.field else None
        return _error_response(HTTP_400, exc.code, exc.message, details)

    @app.exception_handler(DomainError)
    async def handle_domain(_request: Request, exc: DomainError) -> JSONResponse:
        status_code = DOMAIN_STATUS_CODES.get(exc.code, HTTP_400)
        logger.warning("Domain error %s: %s", exc.code, exc.message)
        return _error_response(status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        logger.info("Rejected request body: %d invalid field(s)", len(fields))
        return _error_response(
            HTTP_422, "INVALID_REQUEST", "Request validation failed", fields
        )

    @app.exception_handler(ExternalServiceError)
    async def handle_external(
        _request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        logger.error("External service failure (%s): %s", exc.endpoint, exc.message)
        return _error_response(
            HTTP_502, "EXTERNAL_SERVICE_ERROR", "External wagering service unavailable"
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "INTERNAL_ERROR", "Internal server error")
