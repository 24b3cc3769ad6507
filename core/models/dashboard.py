# =============================================================================
# core/models/dashboard.py - Dashboard Schemas
# =============================================================================
# - KPISummary: headline numbers for the home page, fetched concurrently
# - ApiStats: fixed counters shown on the landing page
# =============================================================================

from pydantic import BaseModel


class EmaeKPI(BaseModel):
    date: str | None = None
    original_value: float | None = None
    monthly_pct_change: float | None = None
    yearly_pct_change: float | None = None


class IpcKPI(BaseModel):
    date: str | None = None
    monthly_change: float | None = None
    year_over_year_change: float | None = None
    accumulated_change: float | None = None


class DollarKPI(BaseModel):
    date: str | None = None
    sell_price: float | None = None
    buy_price: float | None = None


class RiskCountryKPI(BaseModel):
    closing_date: str | None = None
    closing_value: float | None = None
    change_percentage: float | None = None
    monthly_variation: float | None = None
    yearly_variation: float | None = None


class KPISummary(BaseModel):
    """
    Headline indicators. All fields are None when the composite fetch
    failed (no partial results).
    """
    emae: EmaeKPI | None = None
    ipc: IpcKPI | None = None
    dollar: DollarKPI | None = None
    risk_country: RiskCountryKPI | None = None


class ApiStats(BaseModel):
    dataPoints: int
    apiUptime: float
    indicatorsCount: int
    updateTime: int
