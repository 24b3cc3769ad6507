# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import DatabaseDep
from lib.supabase_client import SupabaseClientError

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    database: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(db: DatabaseDep):
    """
    Readiness check endpoint.

    Runs a one-row query against the dollar table to confirm the database
    answers.
    """
    try:
        db.run(db.table("dollar_rates").select("date").limit(1), "check database")
        database = "healthy"
    except SupabaseClientError as e:
        database = f"unhealthy: {e.message[:50]}"

    return ReadinessResponse(
        status="ready" if database == "healthy" else "degraded",
        database=database,
        timestamp=datetime.utcnow().isoformat(),
    )
