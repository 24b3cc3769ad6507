# =============================================================================
# app/routers/labor_market.py - Labor Market Endpoints
# =============================================================================
# Mounted at /api/labor-market.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response

from app.config import settings
from app.dependencies import DatabaseDep
from app.responses import CACHE_SIX_HOURS, csv_response
from core.models.indicators import LaborMarketLatestResponse, LaborMarketMetadata, SeriesResponse
from core.services.labor_market_service import LaborMarketService

router = APIRouter()


@router.get("", response_model=SeriesResponse)
async def get_labor_market_series(
    db: DatabaseDep,
    start_date: str | None = None,
    end_date: str | None = None,
    region: str | None = None,
    age_group: str | None = None,
    gender: str | None = None,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_QUERY_LIMIT)] = settings.DEFAULT_QUERY_LIMIT,
    page: Annotated[int, Query(ge=1)] = 1,
    format: Literal["json", "csv"] = "json",
):
    service = LaborMarketService(db)
    filters = dict(start_date=start_date, end_date=end_date, region=region, age_group=age_group, gender=gender)
    if format == "csv":
        result = service.get_series(**filters, paginate=False)
        return csv_response(result.data, "labor_market.csv", "labor market")
    return service.get_series(**filters, limit=limit, page=page)


@router.get("/latest", response_model=LaborMarketLatestResponse)
async def get_labor_market_latest(
    db: DatabaseDep,
    region: Annotated[str | None, Query(description="Defaults to the 31-city aggregate")] = None,
    age_group: Annotated[str | None, Query(description="Defaults to Total")] = None,
    gender: Annotated[str | None, Query(description="Defaults to Total")] = None,
):
    """Latest quarterly rates for one demographic segment."""
    return LaborMarketService(db).get_latest(region, age_group, gender)


@router.get("/metadata", response_model=LaborMarketMetadata)
async def get_labor_market_metadata(db: DatabaseDep, response: Response):
    """Regions, age groups, genders and the period range covered."""
    response.headers["Cache-Control"] = CACHE_SIX_HOURS
    return LaborMarketService(db).get_metadata()
