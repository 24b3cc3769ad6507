# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - indicators.py: EMAE, IPC, dollar, labor market, country risk, poverty
# - calendar.py: Release calendar and prediction events
# - account.py: Favorites, API keys and identity-provider webhooks
# - dashboard.py: Composite KPI summary and landing stats
#
# These models define the "contract" between API and clients.
# =============================================================================

from .indicators import (
    DOLLAR_TYPE_MAPPING,
    NATIONAL_REGION,
    DateRange,
    DollarLatestResponse,
    DollarMetadata,
    DollarQuote,
    DollarType,
    EmaeLatest,
    EmaeMetadata,
    IpcLatest,
    IpcLatestResponse,
    IpcMetadata,
    LaborMarketLatestResponse,
    LaborMarketMetadata,
    LaborMarketReading,
    Pagination,
    PeriodRange,
    PovertyComparisonResponse,
    PovertyComparisonType,
    PovertyLatestResponse,
    RiskCountryLatest,
    RiskCountryResponse,
    RiskRangeType,
    Sector,
    SectorBreakdown,
    SectorBreakdownEntry,
    SeriesResponse,
)
from .calendar import (
    CalendarEntry,
    CalendarResponse,
    Event,
    EventCreate,
    EventDetail,
    EventPrediction,
)
from .account import (
    ApiKeyResponse,
    ClerkEvent,
    Favorite,
    FavoriteList,
    FavoriteRequest,
    FavoriteToggleResponse,
)
from .dashboard import (
    ApiStats,
    DollarKPI,
    EmaeKPI,
    IpcKPI,
    KPISummary,
    RiskCountryKPI,
)

__all__ = [
    # Indicators
    "DOLLAR_TYPE_MAPPING",
    "NATIONAL_REGION",
    "DateRange",
    "DollarLatestResponse",
    "DollarMetadata",
    "DollarQuote",
    "DollarType",
    "EmaeLatest",
    "EmaeMetadata",
    "IpcLatest",
    "IpcLatestResponse",
    "IpcMetadata",
    "LaborMarketLatestResponse",
    "LaborMarketMetadata",
    "LaborMarketReading",
    "Pagination",
    "PeriodRange",
    "PovertyComparisonResponse",
    "PovertyComparisonType",
    "PovertyLatestResponse",
    "RiskCountryLatest",
    "RiskCountryResponse",
    "RiskRangeType",
    "Sector",
    "SectorBreakdown",
    "SectorBreakdownEntry",
    "SeriesResponse",
    # Calendar / events
    "CalendarEntry",
    "CalendarResponse",
    "Event",
    "EventCreate",
    "EventDetail",
    "EventPrediction",
    # Account
    "ApiKeyResponse",
    "ClerkEvent",
    "Favorite",
    "FavoriteList",
    "FavoriteRequest",
    "FavoriteToggleResponse",
    # Dashboard
    "ApiStats",
    "DollarKPI",
    "EmaeKPI",
    "IpcKPI",
    "KPISummary",
    "RiskCountryKPI",
]
