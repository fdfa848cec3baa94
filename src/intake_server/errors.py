"""Global exception handlers: map service exceptions to HTTP status codes.

``IntakeService`` raises ``ValueError`` for missing records and disallowed
transitions.  Routes stay on the happy path; these handlers pick the status
code from the message and answer with a client-safe body.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Checked in order; first match wins.
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("not found", 404),
    # Edit after staff pickup, wizard load of a legacy record
    ("only valid", 409),
    ("at least one", 400),
]

# Raw messages may carry owner ids; clients only get these.
_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Operation not allowed in the current state",
    400: "Invalid request",
}


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map a service ``ValueError`` to 404 / 409 / 400 (default 400)."""
    msg = str(exc)
    status = 400
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    return JSONResponse(
        status_code=status,
        content={"detail": _SAFE_MESSAGES.get(status, "Invalid request")},
    )


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Unknown mapping table or status name → 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all (payload integrity failures included): log traceback, 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Malformed stored data is a server fault, not a bad request.

    ``ValidationError`` subclasses ``ValueError``; this handler keeps it off
    the 400 path of :func:`value_error_handler`.
    """
    return await generic_error_handler(request, exc)
