"""Global exception handlers - map domain exceptions to HTTP status codes.

The core raises typed ``DelphiError`` subclasses.  Rather than catching
these in every route, we install global handlers that pick the status code
from the error kind.  This keeps route handlers focused on the happy path.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from delphi_estimation.errors import (
    ConflictError,
    DelphiError,
    InsufficientDataError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# --- Error kinds and their HTTP status codes ---
# Checked in order; first match wins.  Anything else (store failures,
# token generation) is a server error.
_STATUS_BY_KIND: list[tuple[type[DelphiError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InsufficientDataError, 422),
]


async def delphi_error_handler(request: Request, exc: DelphiError) -> JSONResponse:
    """Map a ``DelphiError`` to a contextual HTTP error response.

    Client errors carry the exception message, which names only what the
    caller sent.  Server errors are logged with their cause and the client
    receives a generic description.
    """
    status = 500
    for kind, code in _STATUS_BY_KIND:
        if isinstance(exc, kind):
            status = code
            break

    if status == 500:
        logger.error(
            "%s at %s: %s (cause: %r)",
            type(exc).__name__, request.url, exc, exc.__cause__,
        )
        return JSONResponse(
            status_code=500, content={"detail": "Internal server error"}
        )

    logger.warning("%s [%d] at %s: %s", type(exc).__name__, status, request.url, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions - log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
