"""
Centralized error handlers for FastAPI.

Maps brokerage domain errors to HTTP responses by their ErrorKind.
No stack traces or internal details are exposed to clients.
All error responses share the {"error", "detail"} shape.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.brokerage.errors import (
    BrokerageDomainError,
    ErrorKind,
    StorageError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_451 = 451
HTTP_500 = 500

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: HTTP_404,
    ErrorKind.CONFLICT: HTTP_409,
    ErrorKind.INVALID_OPERATION: HTTP_409,
    # 451 signals "status prohibits this", not a legal restriction.
    ErrorKind.INVALID_TRADE_STATUS: HTTP_451,
    ErrorKind.STORAGE_FAILURE: HTTP_500,
}

ERROR_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.CONFLICT: "Conflict",
    ErrorKind.INVALID_OPERATION: "Invalid operation",
    ErrorKind.INVALID_TRADE_STATUS: "Invalid trade status",
    ErrorKind.STORAGE_FAILURE: "Internal server error",
}


def _error_response(status_code: int, error: str, detail: object = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, object] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Reject malformed bodies and path parameters with 400."""
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        logger.warning("Validation failed: %d error(s)", len(errors))
        return _error_response(HTTP_400, "Validation error", errors)

    @app.exception_handler(StorageError)
    async def handle_storage(_request: Request, exc: StorageError) -> JSONResponse:
        """Persistence did not complete; never leak the driver message."""
        logger.error("Storage failure: %s", exc.message)
        return _error_response(HTTP_500, ERROR_BY_KIND[exc.kind])

    @app.exception_handler(BrokerageDomainError)
    async def handle_brokerage_domain(
        _request: Request, exc: BrokerageDomainError
    ) -> JSONResponse:
        """Map any brokerage error to the status of its kind."""
        status_code = STATUS_BY_KIND.get(exc.kind, HTTP_500)
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return _error_response(status_code, ERROR_BY_KIND[exc.kind], exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
