"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions
into proper HTTP responses with appropriate status codes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from saboriman.domain.exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundException,
    ScanInProgressError,
    ValidationException,
)

logger = logging.getLogger(__name__)


# Hey future me, this registers GLOBAL exception handlers for the entire app! Routes just
# raise domain exceptions and never build error responses themselves. Every handler
# returns {"detail": message} so clients see the same shape as FastAPI's HTTPException.
def register_exception_handlers(app: FastAPI) -> None:
    """Register domain exception handlers on the app."""

    @app.exception_handler(EntityNotFoundException)
    async def entity_not_found_handler(
        request: Request, exc: EntityNotFoundException
    ) -> JSONResponse:
        """Handle missing entities with 404 Not Found."""
        logger.debug("Entity not found at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Handle domain validation errors with 422."""
        logger.warning("Validation error at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )

    @app.exception_handler(ScanInProgressError)
    async def scan_in_progress_handler(
        request: Request, exc: ScanInProgressError
    ) -> JSONResponse:
        """Reject a second scan of the same root with 409 Conflict."""
        logger.info("Scan rejected at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message, "library_root": exc.library_root},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle configuration errors with 503 Service Unavailable."""
        logger.error(
            "Configuration error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        """Catch-all for domain errors without a dedicated handler."""
        logger.error("Unhandled domain error at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.message},
        )
