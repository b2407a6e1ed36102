# =============================================================================
# app/exceptions.py - Exception Handlers
# =============================================================================
# The HTTP boundary for errors. Core code raises RehearsalistError subclasses
# tagged with an ErrorKind; this module is the only place where a kind becomes
# a status code.
#
# Every error body has the same shape:
#   {"error": "<message>", "code": "<CODE>", "suggestion"?: ..., "details"?: ...}
# =============================================================================

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import ErrorKind, RehearsalistError

logger = logging.getLogger(__name__)


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 500,
}

# Permissive CORS headers sent on every handler response, including errors
# and pre-flight replies.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def status_for(exc: RehearsalistError) -> int:
    return STATUS_BY_KIND.get(exc.kind, 500)


async def rehearsalist_exception_handler(
    request: Request,
    exc: RehearsalistError
) -> JSONResponse:
    """
    Convert RehearsalistError to JSON response.

    Returns structured error with:
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
        headers=CORS_HEADERS,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body / query validation errors.

    Reported as 400 with the first failing field in the message.
    """
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()

    return JSONResponse(
        status_code=400,
        content={
            "error": message,
            "code": "VALIDATION_ERROR",
            "details": {"errors": [
                {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg")}
                for e in errors
            ]},
        },
        headers=CORS_HEADERS,
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        },
        headers=CORS_HEADERS,
    )
