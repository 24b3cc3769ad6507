# =============================================================================
# app/routers/ipc.py - IPC Endpoints
# =============================================================================
# Consumer price index by category and region. Mounted at /api/ipc.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response

from app.config import settings
from app.dependencies import DatabaseDep
from app.responses import CACHE_HOURLY, csv_response
from core.models.indicators import IpcLatestResponse, IpcMetadata, SeriesResponse
from core.services.ipc_service import IpcService

router = APIRouter()


@router.get("", response_model=SeriesResponse)
async def get_ipc_series(
    db: DatabaseDep,
    response: Response,
    start_date: Annotated[str | None, Query(description="YYYY-MM or YYYY-MM-DD")] = None,
    end_date: Annotated[str | None, Query(description="YYYY-MM or YYYY-MM-DD")] = None,
    category: Annotated[str, Query(description="Component code", examples=["GENERAL"])] = "GENERAL",
    component_type: Annotated[str | None, Query(description="Component type filter")] = None,
    region: Annotated[str, Query(description="Region name, any case")] = "Nacional",
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    year: Annotated[int | None, Query(ge=1900, le=2100)] = None,
    include_variations: bool = True,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_QUERY_LIMIT)] = settings.DEFAULT_QUERY_LIMIT,
    page: Annotated[int, Query(ge=1)] = 1,
    format: Literal["json", "csv"] = "json",
):
    """IPC series for one category and region, newest first."""
    service = IpcService(db)
    filters = dict(
        start_date=start_date,
        end_date=end_date,
        category=category,
        component_type=component_type,
        region=region,
        month=month,
        year=year,
        include_variations=include_variations,
    )
    if format == "csv":
        return csv_response(service.get_series(**filters, paginate=False).data, "ipc_data.csv", "IPC")
    response.headers["Cache-Control"] = CACHE_HOURLY
    return service.get_series(**filters, limit=limit, page=page)


@router.get("/latest", response_model=IpcLatestResponse)
async def get_ipc_latest(
    db: DatabaseDep,
    category: str = "GENERAL",
    region: str = "Nacional",
):
    """Latest IPC reading with the change in monthly variation."""
    return IpcService(db).get_latest(category, region)


@router.get("/metadata", response_model=IpcMetadata)
async def get_ipc_metadata(db: DatabaseDep):
    return IpcService(db).get_metadata()


@router.get("/categories", response_model=SeriesResponse)
async def get_ipc_categories(db: DatabaseDep, region: str = "Nacional"):
    """All components for the latest month in a region."""
    return IpcService(db).get_categories(region)
