# =============================================================================
# app/routers/emae.py - EMAE Endpoints
# =============================================================================
# Monthly economic activity estimator: general series, sectors, latest
# readings and catalog metadata. Mounted at /api/emae.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response

from app.config import settings
from app.dependencies import DatabaseDep
from app.responses import CACHE_HOURLY, csv_response
from core.models.indicators import EmaeLatest, EmaeMetadata, SectorBreakdown, SeriesResponse
from core.services.emae_service import EmaeService

router = APIRouter()

Limit = Annotated[int, Query(ge=1, le=settings.MAX_QUERY_LIMIT, description="Rows per page")]
Page = Annotated[int, Query(ge=1, description="Page number")]
DateBound = Annotated[str | None, Query(description="YYYY-MM or YYYY-MM-DD", examples=["2024-01"])]
Format = Annotated[Literal["json", "csv"], Query(description="Response format")]


@router.get("", response_model=SeriesResponse)
async def get_emae_series(
    db: DatabaseDep,
    response: Response,
    start_date: DateBound = None,
    end_date: DateBound = None,
    limit: Limit = settings.DEFAULT_QUERY_LIMIT,
    page: Page = 1,
    format: Format = "json",
):
    """
    General EMAE series: original, seasonally adjusted and trend-cycle values.
    """
    service = EmaeService(db)
    if format == "csv":
        result = service.get_series(start_date, end_date, paginate=False)
        return csv_response(result.data, "emae_data.csv", "EMAE")
    result = service.get_series(start_date, end_date, limit=limit, page=page)
    response.headers["Cache-Control"] = CACHE_HOURLY
    return result


@router.get("/latest", response_model=EmaeLatest)
async def get_emae_latest(
    db: DatabaseDep,
    sector_code: Annotated[str, Query(description="Sector code, GENERAL for the aggregate")] = "GENERAL",
    by_activity: Annotated[bool, Query(description="Read from the per-activity series")] = False,
):
    """Most recent EMAE reading."""
    return EmaeService(db).get_latest(sector_code, by_activity)


@router.get("/metadata", response_model=EmaeMetadata)
async def get_emae_metadata(db: DatabaseDep):
    """Sector catalog, date range and available series."""
    return EmaeService(db).get_metadata()


@router.get("/sectors", response_model=SeriesResponse)
async def get_emae_sectors(
    db: DatabaseDep,
    start_date: DateBound = None,
    end_date: DateBound = None,
    sector_code: Annotated[str | None, Query(description="One code or a comma separated list")] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    year: Annotated[int | None, Query(ge=1900, le=2100)] = None,
    limit: Limit = settings.DEFAULT_QUERY_LIMIT,
    page: Page = 1,
    format: Format = "json",
):
    """
    Historical data per activity sector.

    Month and year match the reading date; a month alone matches that month
    in every year.
    """
    service = EmaeService(db)
    if format == "csv":
        result = service.get_sectors(start_date, end_date, sector_code, month, year, paginate=False)
        return csv_response(result.data, "emae_sectors.csv", "EMAE")
    return service.get_sectors(start_date, end_date, sector_code, month, year, limit=limit, page=page)


@router.get("/sectors/latest", response_model=SectorBreakdown)
async def get_emae_sector_breakdown(db: DatabaseDep):
    """Every sector for the latest published month."""
    return EmaeService(db).get_sector_breakdown()


@router.get("/by-activity", response_model=SeriesResponse)
async def get_emae_by_activity(
    db: DatabaseDep,
    start_date: DateBound = None,
    end_date: DateBound = None,
    sector_code: str | None = None,
    group_by_sector: bool = False,
    limit: Limit = settings.DEFAULT_QUERY_LIMIT,
    page: Page = 1,
):
    """Raw activity rows, or one series per sector with group_by_sector."""
    return EmaeService(db).get_by_activity(
        start_date, end_date, sector_code, group_by_sector, limit=limit, page=page
    )
