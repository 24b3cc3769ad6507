# =============================================================================
# app/routers/not_found.py - Unknown API Route Responder
# =============================================================================
# Answers 404 with the list of public routes, for every method, in two cases:
# - /api/not-found, the target of the allow-list middleware rewrite
# - any /api path under a listed prefix that no other route matches
#
# Mounted last under /api so every real route is tried first.
# =============================================================================

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter()

AVAILABLE_DOCS = "/docs"

API_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]

PUBLIC_ROUTES = [
    "/api/emae",
    "/api/ipc",
    "/api/dollar",
    "/api/labor-market",
    "/api/riesgo-pais",
    "/api/poverty",
    "/api/calendar",
    "/api/events",
    "/api/stats",
    "/api/dashboard/kpis",
    "/api/health",
]


def not_found_body() -> dict:
    return {
        "error": "Route not found",
        "message": f"The requested route does not exist. See {AVAILABLE_DOCS} for the available routes.",
        "available_docs": AVAILABLE_DOCS,
        "available_routes": PUBLIC_ROUTES,
    }


@router.api_route("/not-found", methods=API_METHODS)
async def api_not_found():
    return JSONResponse(status_code=404, content=not_found_body())


@router.api_route("/{unmatched:path}", methods=API_METHODS)
async def api_unmatched(request: Request, unmatched: str):
    logger.debug(f"No route for {request.method} {request.url.path}")
    return JSONResponse(status_code=404, content=not_found_body())
