# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every failure that reaches a client is a typed exception with an HTTP status
# and a machine-readable code; handlers below render them as JSON.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError
from lib.utils import ApplicationError


class ArgenStatsException(ApplicationError):
    """
    Base exception for the ArgenStats API.

    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ARGENSTATS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            code=code,
            status_code=status_code,
            suggestion=suggestion,
            details=details,
        )


# =============================================================================
# Query Exceptions
# =============================================================================

class IndicatorNotFoundError(ArgenStatsException):
    """Raised when a query for an indicator returns no rows."""

    def __init__(self, indicator: str, criteria: dict[str, Any] | None = None):
        super().__init__(
            message=f"No {indicator} data found for the specified criteria",
            code="INDICATOR_NOT_FOUND",
            status_code=404,
            suggestion="Check the filter values against the /metadata endpoint of this indicator",
            details={"indicator": indicator, "criteria": criteria or {}},
        )


class InvalidQueryError(ArgenStatsException):
    """Raised when a query parameter cannot be interpreted."""

    def __init__(self, parameter: str, value: Any, expected: str):
        super().__init__(
            message=f"Invalid value for '{parameter}': {value}",
            code="INVALID_QUERY",
            status_code=400,
            suggestion=f"Expected {expected}",
            details={"parameter": parameter, "value": value},
        )


class EventNotFoundError(ArgenStatsException):
    """Raised when an event slug doesn't exist."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Event not found: {slug}",
            code="EVENT_NOT_FOUND",
            status_code=404,
            suggestion="List available events with GET /api/events",
            details={"slug": slug},
        )


class EventExistsError(ArgenStatsException):
    """Raised when creating an event whose slug is already taken."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"An event with slug '{slug}' already exists",
            code="EVENT_EXISTS",
            status_code=409,
            suggestion="Choose a different event name",
            details={"slug": slug},
        )


# =============================================================================
# Account Exceptions
# =============================================================================

class UserNotFoundError(ArgenStatsException):
    """Raised when an authenticated Clerk user has no row in users."""

    def __init__(self, clerk_user_id: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="The account may still be syncing from the identity provider; retry in a few seconds",
            details={"clerk_user_id": clerk_user_id},
        )


class FavoriteExistsError(ArgenStatsException):
    """Raised when adding a favorite that is already stored."""

    def __init__(self, indicator_type: str, indicator_id: str | None):
        super().__init__(
            message="Favorite already exists",
            code="FAVORITE_EXISTS",
            status_code=409,
            suggestion="Use POST /api/user/favorites/toggle to flip membership",
            details={"indicator_type": indicator_type, "indicator_id": indicator_id},
        )


class UnauthorizedError(ArgenStatsException):
    """Raised when a shared secret is missing or wrong."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )


class WebhookVerificationError(ArgenStatsException):
    """Raised when a Clerk webhook signature cannot be verified."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Webhook verification failed: {error}",
            code="WEBHOOK_VERIFICATION_FAILED",
            status_code=400,
            suggestion="Check CLERK_WEBHOOK_SECRET and that svix headers are forwarded",
        )


# =============================================================================
# Background Job Exceptions
# =============================================================================

class QueueUnavailableError(ArgenStatsException):
    """Raised when a task cannot be handed to the Celery broker."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to queue task: {error}",
            code="QUEUE_UNAVAILABLE",
            status_code=503,
            suggestion="Check that Redis is running and REDIS_URL is correct",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def argenstats_exception_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Convert ApplicationError subclasses to a JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError,
) -> JSONResponse:
    """Render data store failures with their own status (503 by default)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
