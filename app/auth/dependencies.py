# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Two strict dependencies differ only in how a bad credential is reported:
# - get_current_user: 401 Unauthorized
# - get_token_user: 400 Bad Request (self-service endpoints)
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.post("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from core.errors import InvalidTokenError, RehearsalistError, UnauthorizedError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. Missing headers are reported by us, not by
# FastAPI, so every auth failure has the same error body.
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[Any, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    # Decode header without verification to get algorithm and key ID
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    # For ES256 or other algorithms, use JWKS
    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_access_token(
    token: str,
    error_cls: type[RehearsalistError] = UnauthorizedError,
) -> AuthUser:
    """
    Verify a Supabase access token and extract the user.

    Args:
        token: Raw JWT (without the "Bearer " prefix)
        error_cls: Exception raised for every verification failure

    Raises:
        error_cls: If the token is invalid, expired or lacks a user id
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        if not signing_key:
            logger.error("No JWT verification key configured")
            raise error_cls("Invalid user token", suggestion="Set SUPABASE_JWT_SECRET")

        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise error_cls("Token has expired", code="TOKEN_EXPIRED")

    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise error_cls(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise error_cls("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise error_cls("Invalid token: malformed user ID")

    metadata = payload.get("user_metadata")
    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(
        id=user_uuid,
        email=payload.get("email"),
        user_metadata=metadata if isinstance(metadata, dict) else {},
    )


def _resolve(
    credentials: Optional[HTTPAuthorizationCredentials],
    error_cls: type[RehearsalistError],
) -> AuthUser:
    if credentials is None or not credentials.credentials:
        raise error_cls("No authorization header", code="MISSING_TOKEN")
    return decode_access_token(credentials.credentials, error_cls)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from Supabase JWT token.

    Raises:
        UnauthorizedError: 401 if token is missing, invalid or expired
    """
    return _resolve(credentials, UnauthorizedError)


async def get_token_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Same as get_current_user, but failures are reported as 400.

    Raises:
        InvalidTokenError: 400 if token is missing, invalid or expired
    """
    return _resolve(credentials, InvalidTokenError)

