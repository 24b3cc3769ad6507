# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Clerk session tokens (RS256) against Clerk's JWKS.
#
# The JWKS document is fetched with httpx and cached for an hour. If a
# refresh fails, the previous keys keep being used.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by us, not 403 by HTTPBearer
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _fetch_jwks() -> dict:
    """Fetch Clerk's JWKS with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    if not settings.CLERK_JWKS_URL:
        logger.warning("CLERK_JWKS_URL is not configured; no token can be verified")
        return {"keys": []}

    try:
        response = httpx.get(settings.CLERK_JWKS_URL, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {settings.CLERK_JWKS_URL}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        return _jwks_cache or {"keys": []}


def _get_signing_key(token: str) -> dict:
    """
    Find the JWK matching the token's key id.

    Raises:
        UnauthorizedError: If the header is unreadable or the key is unknown
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise UnauthorizedError("Invalid token: unreadable header")

    kid = header.get("kid")
    for key in _fetch_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key

    logger.warning(f"No signing key found for kid={kid}")
    raise UnauthorizedError("Invalid token: unknown signing key")


def verify_token(token: str) -> AuthUser:
    """
    Verify a Clerk session token and return the user it identifies.

    The issuer is checked when CLERK_ISSUER is set. Clerk session tokens
    carry no audience claim.

    Raises:
        UnauthorizedError: If the token is invalid, expired, or has no subject
    """
    signing_key = _get_signing_key(token)
    try:
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[signing_key.get("alg", "RS256")],
            issuer=settings.CLERK_ISSUER or None,
            options={"verify_aud": False},
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise UnauthorizedError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise UnauthorizedError(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise UnauthorizedError("Invalid token: missing user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_id, email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Require an authenticated user.

    Raises:
        UnauthorizedError: 401 if there is no valid Bearer token
    """
    if credentials is None:
        raise UnauthorizedError()
    return verify_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None if no token is provided or the token is invalid, so the
    endpoint can treat the caller as anonymous.
    """
    if credentials is None:
        return None

    try:
        return verify_token(credentials.credentials)
    except UnauthorizedError:
        return None
