# =============================================================================
# core/errors.py - Domain Error Kinds
# =============================================================================
# Every failure the core can produce is tagged with one ErrorKind.
# The core never decides HTTP status codes: app/exceptions.py maps each kind
# to a status at the API boundary.
#
# Usage:
#   from core.errors import NotFoundError
#   raise NotFoundError("Band not found", code="BAND_NOT_FOUND")
# =============================================================================

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    Outcome categories for failed operations.

    - bad_request: malformed or missing input
    - unauthorized: missing or invalid credential
    - forbidden: authenticated but not allowed
    - not_found: referenced entity is absent
    - upstream: data store or third-party API failure
    """
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


class RehearsalistError(Exception):
    """
    Base error for the Rehearsalist core.

    Subclasses fix the `kind`; callers choose the message and code.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM
    default_code: str = "REHEARSALIST_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class BadRequestError(RehearsalistError):
    """Raised when required input is missing or malformed."""
    kind = ErrorKind.BAD_REQUEST
    default_code = "BAD_REQUEST"


class UnauthorizedError(RehearsalistError):
    """Raised when the bearer credential is missing or invalid."""
    kind = ErrorKind.UNAUTHORIZED
    default_code = "UNAUTHORIZED"


class InvalidTokenError(BadRequestError):
    """
    Credential failure reported as a bad request.

    Used by the self-service endpoints (fix-user-data, upload-avatar) that
    have always answered auth problems with 400.
    """
    default_code = "INVALID_TOKEN"


class ForbiddenError(RehearsalistError):
    """Raised when the caller is authenticated but not allowed."""
    kind = ErrorKind.FORBIDDEN
    default_code = "FORBIDDEN"


class NotFoundError(RehearsalistError):
    """Raised when a referenced entity does not exist."""
    kind = ErrorKind.NOT_FOUND
    default_code = "NOT_FOUND"


class UpstreamError(RehearsalistError):
    """Raised when the data store or the catalog API fails."""
    kind = ErrorKind.UPSTREAM
    default_code = "UPSTREAM_ERROR"


class UpstreamAuthError(UpstreamError):
    """Raised when the catalog API credential exchange fails."""
    default_code = "UPSTREAM_AUTH_FAILED"
