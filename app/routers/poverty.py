# =============================================================================
# app/routers/poverty.py - Poverty Endpoints
# =============================================================================
# Mounted at /api/poverty.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import DatabaseDep
from core.models.indicators import (
    PovertyComparisonResponse,
    PovertyComparisonType,
    PovertyLatestResponse,
    SeriesResponse,
)
from core.services.poverty_service import PovertyService

router = APIRouter()


@router.get("/latest", response_model=PovertyLatestResponse)
async def get_poverty_latest(db: DatabaseDep, region: str | None = None):
    """National and regional latest rates, or one region's latest row."""
    return PovertyService(db).get_latest(region)


@router.get("/series", response_model=SeriesResponse)
async def get_poverty_series(
    db: DatabaseDep,
    region: str | None = None,
    indicator: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
):
    """Semester series for a region, optionally reduced to one rate."""
    return PovertyService(db).get_series(region, indicator, start_date, end_date)


@router.get("/comparison", response_model=PovertyComparisonResponse)
async def get_poverty_comparison(
    db: DatabaseDep,
    comparison: Annotated[PovertyComparisonType, Query(alias="type")] = PovertyComparisonType.REGIONAL,
    period: Annotated[str | None, Query(description="Semester, regional comparison only")] = None,
    regions: Annotated[str | None, Query(description="Comma separated, temporal comparison only")] = None,
):
    """
    Regional: every region for one semester ranked by poverty rate, each
    flagged against the national aggregate. Temporal: the series of the
    requested regions, grouped by region.
    """
    return PovertyService(db).compare(comparison, period, regions)
