# =============================================================================
# core/models/indicators.py - Indicator Schemas
# =============================================================================
# These models define the API contract for the indicator endpoints:
# - EMAE (monthly economic activity estimator), general and by sector
# - IPC (consumer price index), general and by category
# - Dollar quotes by market type
# - Labor market rates
# - Country risk (EMBI spread)
# - Poverty and indigence rates
#
# Readings are immutable once published. A revision is a new row for the
# same period; nothing here models revision history.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Shared Shapes
# =============================================================================

class DateRange(BaseModel):
    """First and last date available for a series."""
    first_date: str | None = None
    last_date: str | None = None
    total_months: int | None = None


class Pagination(BaseModel):
    """Page information for list endpoints."""
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_items: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)
    has_more: bool = False

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "Pagination":
        total_pages = -(-total_items // limit) if total_items else 0
        return cls(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=total_pages,
            has_more=page * limit < total_items,
        )


class SeriesResponse(BaseModel):
    """
    Generic envelope for historical series.

    Example:
        {
            "data": [{"date": "2024-01-01", "original_value": 148.2}],
            "metadata": {"count": 1, "filtered_by": {"start_date": "2024-01-01"}},
            "pagination": {"page": 1, "limit": 100, "total_items": 1, ...}
        }
    """
    data: list[dict[str, Any]] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    pagination: Pagination | None = None


# =============================================================================
# EMAE
# =============================================================================

class EmaeLatest(BaseModel):
    """Most recent EMAE reading for a sector (GENERAL by default)."""
    date: str
    sector: str = ""
    sector_code: str = ""
    original_value: float = 0
    yearly_pct_change: float | None = None
    monthly_pct_change: float | None = None
    seasonally_adjusted_value: float | None = None
    trend_cycle_value: float | None = None


class Sector(BaseModel):
    """An EMAE economic activity sector."""
    code: str
    name: str


class EmaeMetadata(BaseModel):
    """Catalog information for the EMAE endpoints."""
    sectors: list[Sector]
    date_range: DateRange
    available_series: dict[str, list[str]]
    metadata: dict[str, Any]


class SectorBreakdownEntry(BaseModel):
    """One sector of a breakdown snapshot."""
    sector: str | None = None
    value: float | None = None
    monthly_pct_change: float | None = None
    yearly_pct_change: float | None = None
    weight: float | None = None


class SectorBreakdown(BaseModel):
    """
    Sector-partitioned snapshot for a single date.

    Keys of `sectors` are sector codes and are unique per date. Weights are
    reported as stored; they are not re-normalized.
    """
    date: str | None = None
    sectors: dict[str, SectorBreakdownEntry] = Field(default_factory=dict)


# =============================================================================
# IPC
# =============================================================================

class IpcLatest(BaseModel):
    """Most recent IPC reading for a category and region."""
    date: str
    category: str = ""
    category_code: str = ""
    category_type: str = ""
    index_value: float = 0
    region: str = ""
    monthly_pct_change: float | None = None
    yearly_pct_change: float | None = None
    accumulated_pct_change: float | None = None
    monthly_change_variation: float = 0


class IpcLatestResponse(BaseModel):
    data: IpcLatest
    metadata: dict[str, Any]


class IpcMetadata(BaseModel):
    components: list[dict[str, Any]]
    regions: list[str]
    date_range: DateRange


# =============================================================================
# Dollar
# =============================================================================

class DollarType(str, Enum):
    """Dollar market types quoted in Argentina."""
    BLUE = "BLUE"
    CCL = "CCL"
    CRYPTO = "CRYPTO"
    MEP = "MEP"
    MAYORISTA = "MAYORISTA"
    OFICIAL = "OFICIAL"
    TARJETA = "TARJETA"


# Maps the upstream "casa" field to our dollar types
DOLLAR_TYPE_MAPPING: dict[str, DollarType] = {
    "contadoconliqui": DollarType.CCL,
    "bolsa": DollarType.MEP,
    "cripto": DollarType.CRYPTO,
    "blue": DollarType.BLUE,
    "oficial": DollarType.OFICIAL,
    "mayorista": DollarType.MAYORISTA,
    "tarjeta": DollarType.TARJETA,
}


class DollarQuote(BaseModel):
    """Latest buy/sell quote for one dollar type."""
    date: str
    dollar_type: str
    buy_price: float
    sell_price: float
    spread: float | None = Field(
        default=None,
        description="Sell over buy difference, in percent of the buy price"
    )
    last_updated: str | None = None


class DollarLatestResponse(BaseModel):
    data: list[DollarQuote]
    metadata: dict[str, Any]


class DollarMetadata(BaseModel):
    dollar_types: list[str]
    date_range: DateRange


# =============================================================================
# Labor Market
# =============================================================================

class LaborMarketReading(BaseModel):
    """Quarterly labor market rates for a demographic segment."""
    date: str
    period: str | None = None
    region: str | None = None
    age_group: str | None = None
    gender: str | None = None
    unemployment_rate: float = 0
    activity_rate: float = 0
    employment_rate: float = 0
    economically_active_population: float = 0
    employed_population: float = 0
    unemployed_population: float = 0
    total_population: float = 0
    inactive_population: float = 0


class LaborMarketLatestResponse(BaseModel):
    data: LaborMarketReading
    metadata: dict[str, Any]


class PeriodRange(BaseModel):
    """First and last survey period, e.g. "T1 2017" to "T4 2024"."""
    first: str | None = None
    last: str | None = None


class LaborMarketMetadata(BaseModel):
    regions: list[str]
    age_groups: list[str]
    genders: list[str]
    indicators: list[str]
    date_range: DateRange
    period_range: PeriodRange | None = None
    metadata: dict[str, Any]


# =============================================================================
# Country Risk
# =============================================================================

class RiskRangeType(str, Enum):
    """Predefined windows for the country-risk endpoint."""
    LATEST = "latest"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    YEAR_TO_DATE = "year_to_date"
    LAST_YEAR = "last_year"
    CUSTOM = "custom"


class RiskCountryResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]
    meta: dict[str, Any]
    stats: dict[str, Any] | None = None


class RiskCountryLatest(BaseModel):
    """Latest country-risk close with variations in percent."""
    closing_date: str
    closing_value: float
    change_percentage: float | None = None
    monthly_variation: float | None = None
    yearly_variation: float | None = None
    monthly_reference_date: str | None = None
    yearly_reference_date: str | None = None


# =============================================================================
# Poverty
# =============================================================================

NATIONAL_REGION = "Total 31 aglomerados"


class PovertyLatestResponse(BaseModel):
    data: dict[str, Any]
    metadata: dict[str, Any]


class PovertyComparisonType(str, Enum):
    """
    Comparison modes for /api/poverty/comparison.

    - regional: every region for one semester, ranked by poverty rate
    - temporal: full series for a few regions, grouped by region
    """
    REGIONAL = "regional"
    TEMPORAL = "temporal"


class PovertyComparisonResponse(BaseModel):
    data: list[dict[str, Any]] | dict[str, list[dict[str, Any]]]
    metadata: dict[str, Any]
