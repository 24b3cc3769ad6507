# =============================================================================
# app/routers/riesgo_pais.py - Country Risk Endpoints
# =============================================================================
# Mounted at /api/riesgo-pais.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Query
from pydantic import BaseModel

from app.dependencies import DatabaseDep
from core.models.indicators import RiskCountryLatest, RiskCountryResponse, RiskRangeType
from core.services.risk_country_service import RiskCountryService

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class RiskCountryLatestResponse(BaseModel):
    success: bool = True
    data: RiskCountryLatest


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=RiskCountryResponse)
async def get_risk_country(
    db: DatabaseDep,
    type: Annotated[RiskRangeType, Query(description="Predefined date window")] = RiskRangeType.LAST_30_DAYS,
    date_from: Annotated[str | None, Query(description="Required when type=custom")] = None,
    date_to: Annotated[str | None, Query(description="Required when type=custom")] = None,
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
    order: Literal["asc", "desc"] = "desc",
):
    """
    Daily country risk closings for a window, with summary statistics.

    Types: latest, last_7_days, last_30_days, last_90_days, year_to_date,
    last_year, custom (requires date_from and date_to).
    """
    return RiskCountryService(db).get_range(type, date_from, date_to, limit, order)


@router.get("/with-variations", response_model=RiskCountryLatestResponse)
async def get_risk_country_with_variations(db: DatabaseDep):
    """Latest close with daily, monthly and yearly variation in percent."""
    return RiskCountryLatestResponse(data=RiskCountryService(db).get_latest_with_variations())
