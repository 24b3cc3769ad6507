# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The database client and the outbound HTTP client are created once by the
# application lifespan and kept on app.state; tests replace them through
# app.dependency_overrides.
# =============================================================================

import hmac
import logging
from typing import Annotated

import httpx
from fastapi import Depends, Header, Request

from app.config import settings
from app.exceptions import UnauthorizedError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def get_database(request: Request) -> SupabaseClient:
    """Get the process-wide Supabase client wrapper."""
    return request.app.state.database


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared async HTTP client used for self-calls."""
    return request.app.state.http_client


# Type aliases for dependency injection
DatabaseDep = Annotated[SupabaseClient, Depends(get_database)]
HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]


# =============================================================================
# Shared-Secret Guards
# =============================================================================

def _matches_secret(provided: str | None, expected: str) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_admin_key(
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """
    Require the x-admin-key header to equal ADMIN_SYNC_KEY.

    Raises:
        UnauthorizedError: 401 on a missing or wrong key
    """
    if not _matches_secret(x_admin_key, settings.ADMIN_SYNC_KEY):
        logger.warning("Rejected request with missing or invalid admin key")
        raise UnauthorizedError()


async def require_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """
    Require "Authorization: Bearer <CRON_SECRET_KEY>".

    Raises:
        UnauthorizedError: 401 on a missing or wrong token
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not _matches_secret(token, settings.CRON_SECRET_KEY):
        logger.warning("Rejected cron request with missing or invalid secret")
        raise UnauthorizedError()
