# =============================================================================
# app/routers/dollar.py - Dollar Quote Endpoints
# =============================================================================
# Mounted at /api/dollar.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response

from app.config import settings
from app.dependencies import DatabaseDep
from app.responses import CACHE_SHORT, csv_response
from core.models.indicators import DollarLatestResponse, DollarMetadata, SeriesResponse
from core.services.dollar_service import DollarService

router = APIRouter()


@router.get("", response_model=SeriesResponse)
async def get_dollar_series(
    db: DatabaseDep,
    response: Response,
    start_date: Annotated[str | None, Query(description="YYYY-MM or YYYY-MM-DD")] = None,
    end_date: Annotated[str | None, Query(description="YYYY-MM or YYYY-MM-DD")] = None,
    type: Annotated[str | None, Query(description="Dollar type(s), comma separated", examples=["BLUE,MEP"])] = None,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_QUERY_LIMIT)] = settings.DEFAULT_QUERY_LIMIT,
    page: Annotated[int, Query(ge=1)] = 1,
    format: Literal["json", "csv"] = "json",
):
    """Historical quotes, newest first."""
    service = DollarService(db)
    if format == "csv":
        result = service.get_series(start_date, end_date, type, paginate=False)
        return csv_response(result.data, "dollar_rates.csv", "dollar")
    response.headers["Cache-Control"] = CACHE_SHORT
    return service.get_series(start_date, end_date, type, limit=limit, page=page)


@router.get("/latest", response_model=DollarLatestResponse)
async def get_dollar_latest(
    db: DatabaseDep,
    response: Response,
    type: Annotated[str | None, Query(description="One dollar type; all types if omitted")] = None,
):
    """Latest quote per type, with the buy/sell spread in percent."""
    response.headers["Cache-Control"] = CACHE_SHORT
    return DollarService(db).get_latest(type)


@router.get("/metadata", response_model=DollarMetadata)
async def get_dollar_metadata(db: DatabaseDep):
    return DollarService(db).get_metadata()
