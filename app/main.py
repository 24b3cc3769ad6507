# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ArgenStats API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    argenstats_exception_handler,
    supabase_exception_handler,
    validation_exception_handler,
)
from app.middleware import ApiAllowListMiddleware
from app.routers import (
    calendar,
    cron,
    dashboard,
    dollar,
    emae,
    events,
    favorites,
    health,
    ipc,
    labor_market,
    not_found,
    poverty,
    riesgo_pais,
    seo,
    stats,
    tasks,
    user,
    webhooks,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: create the Supabase client wrapper and the shared HTTP client
    - Shutdown: close the HTTP client
    """
    logger.info(f"Starting ArgenStats API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    app.state.database = SupabaseClient.from_settings()
    app.state.http_client = httpx.AsyncClient()

    yield

    logger.info("Shutting down ArgenStats API")
    await app.state.http_client.aclose()


# Create FastAPI application
app = FastAPI(
    title="ArgenStats API",
    description="""
## Argentine Economic Indicators

Public JSON API for Argentina's main macroeconomic series.

| Indicator | Route |
|-----------|-------|
| Economic activity (EMAE) | `/api/emae` |
| Consumer prices (IPC) | `/api/ipc` |
| Dollar quotes | `/api/dollar` |
| Labor market | `/api/labor-market` |
| Country risk | `/api/riesgo-pais` |
| Poverty | `/api/poverty` |
| Release calendar | `/api/calendar` |

Dates accept `YYYY-MM` (first day of month) or `YYYY-MM-DD`. Series endpoints
paginate with `limit` (default 100, max 1000) and `page`, and most accept
`format=csv`.

```bash
curl "http://localhost:8000/api/emae/sectors?sector_code=A,B&start_date=2023-01"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "EMAE", "description": "Monthly economic activity estimator"},
        {"name": "IPC", "description": "Consumer price index"},
        {"name": "Dollar", "description": "Dollar quotes by market"},
        {"name": "Labor Market", "description": "Employment and unemployment rates"},
        {"name": "Country Risk", "description": "EMBI spread daily closings"},
        {"name": "Poverty", "description": "Poverty and indigence rates"},
        {"name": "Calendar", "description": "Release calendar"},
        {"name": "Events", "description": "Prediction events"},
        {"name": "Dashboard", "description": "Headline KPIs and landing counters"},
        {"name": "Favorites", "description": "Per-user favorite indicators"},
        {"name": "Account", "description": "Per-user API key"},
        {"name": "Webhooks", "description": "Identity provider user sync"},
        {"name": "Cron", "description": "Scheduled data refresh triggers"},
        {"name": "Tasks", "description": "Track refresh task progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Unknown /api paths are answered by /api/not-found
app.add_middleware(ApiAllowListMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(ApplicationError, argenstats_exception_handler)
app.add_exception_handler(SupabaseClientError, supabase_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Indicator endpoints
app.include_router(emae.router, prefix="/api/emae", tags=["EMAE"])
app.include_router(ipc.router, prefix="/api/ipc", tags=["IPC"])
app.include_router(dollar.router, prefix="/api/dollar", tags=["Dollar"])
app.include_router(labor_market.router, prefix="/api/labor-market", tags=["Labor Market"])
app.include_router(riesgo_pais.router, prefix="/api/riesgo-pais", tags=["Country Risk"])
app.include_router(poverty.router, prefix="/api/poverty", tags=["Poverty"])

# Calendar and events
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])

# Dashboard and landing page
app.include_router(stats.router, prefix="/api", tags=["Dashboard"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

# Accounts
app.include_router(favorites.router, prefix="/api/user/favorites", tags=["Favorites"])
app.include_router(user.router, prefix="/api/user", tags=["Account"])
app.include_router(webhooks.router, prefix="/api", tags=["Webhooks"])

# Background refresh
app.include_router(cron.router, prefix="/api/cron", tags=["Cron"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])

# Health check endpoints
app.include_router(health.router, prefix="/api/health", tags=["Health"])

# Fallbacks and crawler metadata
app.include_router(not_found.router, prefix="/api", include_in_schema=False)
app.include_router(seo.router)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info and the public analytics ids the
    frontend embeds.
    """
    return {
        "name": "ArgenStats API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
        "analytics": {
            "ga_measurement_id": settings.GA_MEASUREMENT_ID or None,
            "clarity_project_id": settings.CLARITY_PROJECT_ID or None,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
