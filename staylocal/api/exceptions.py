"""FastAPI exception handlers for converting domain errors to HTTP responses.

Every ``StayLocalError`` carries its own HTTP status and error code, so the
handler only has to serialise it::

    {"detail": "Reservation not found", "error_code": "not_found"}

Anything else is logged and answered with a generic 500 that does not leak
internal detail.

Usage:
    from staylocal.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from staylocal.errors import StayLocalError, UnauthorizedError

logger = logging.getLogger(__name__)


async def staylocal_error_handler(request: Request, exc: StayLocalError) -> JSONResponse:
    """Convert a domain error to its JSON response."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.code},
        headers=headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and return a generic 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error_code": "internal"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(StayLocalError, staylocal_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
