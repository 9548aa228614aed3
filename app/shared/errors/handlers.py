"""
Centralized error handlers for FastAPI.

Maps market domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.market.errors import (
    ConflictError,
    DomainValidationError,
    ForbiddenError,
    MarketDomainError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_403 = 403
HTTP_404 = 404
HTTP_409 = 409
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        """Handle missing users and posts."""
        logger.warning("Not found: %s", exc.message)
        return _error_response(HTTP_404, "Not found", exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(_request: Request, exc: ForbiddenError) -> JSONResponse:
        """Handle actions on resources the caller does not own."""
        logger.warning("Forbidden: %s", exc.message)
        return _error_response(HTTP_403, "Forbidden", exc.message)

    @app.exception_handler(DomainValidationError)
    async def handle_validation(
        _request: Request, exc: DomainValidationError
    ) -> JSONResponse:
        """Handle requests that break a business rule."""
        logger.warning("Invalid request: %s", exc.message)
        return _error_response(HTTP_400, "Invalid request", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(_request: Request, exc: ConflictError) -> JSONResponse:
        """Handle uniqueness violations."""
        logger.warning("Conflict: %s", exc.message)
        return _error_response(HTTP_409, "Conflict", exc.message)

    @app.exception_handler(MarketDomainError)
    async def handle_market_domain(
        _request: Request, exc: MarketDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled market domain errors."""
        logger.error("Unhandled market domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
