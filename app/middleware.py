# =============================================================================
# app/middleware.py - API Route Allow-List
# =============================================================================
# Pure ASGI middleware that sends unknown /api paths to /api/not-found.
#
# A path under /api passes unchanged if it equals an allow-listed prefix or
# starts with prefix + "/". Anything else under /api has its scope path
# rewritten so the not-found responder answers it, for every HTTP method.
# Paths outside /api are never touched.
# =============================================================================

import logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
NOT_FOUND_PATH = "/api/not-found"

ALLOWED_PREFIXES = (
    "/api/ipc",
    "/api/emae",
    "/api/dollar",
    "/api/labor-market",
    "/api/riesgo-pais",
    "/api/poverty",
    "/api/calendar",
    "/api/events",
    "/api/stats",
    "/api/dashboard",
    "/api/health",
    "/api/tasks",
    "/api/cron/update-dollar",
    "/api/cron/update-riesgo-pais",
    "/api/webhook/clerk",
    "/api/test/webhook",
    "/api/user/favorites",
    "/api/user/api-key",
    NOT_FOUND_PATH,
)


def is_allowed(path: str, prefixes: tuple[str, ...] = ALLOWED_PREFIXES) -> bool:
    """
    Check a path against the allow-list.

    Example:
        is_allowed("/api/emae/latest")  # True
        is_allowed("/api/emaex")        # False
    """
    if path != API_PREFIX and not path.startswith(API_PREFIX + "/"):
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


class ApiAllowListMiddleware:
    """Rewrites unlisted /api requests to the not-found route."""

    def __init__(self, app, prefixes: tuple[str, ...] = ALLOWED_PREFIXES):
        self.app = app
        self.prefixes = prefixes

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and not is_allowed(scope["path"], self.prefixes):
            logger.debug(f"Unknown API path {scope['path']}, rewriting to {NOT_FOUND_PATH}")
            scope = dict(scope)
            scope["path"] = NOT_FOUND_PATH
            scope["raw_path"] = NOT_FOUND_PATH.encode()
        await self.app(scope, receive, send)
