# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .emae_service import EmaeService
from .ipc_service import IpcService
from .dollar_service import DollarService
from .labor_market_service import LaborMarketService
from .risk_country_service import RiskCountryService
from .poverty_service import PovertyService
from .calendar_service import CalendarService
from .event_service import EventService
from .favorite_service import FavoriteService
from .user_sync_service import UserSyncService
from .api_key_service import ApiKeyService
from .dashboard_service import DashboardService
from .refresh_service import RefreshService, RefreshError

__all__ = [
    "EmaeService",
    "IpcService",
    "DollarService",
    "LaborMarketService",
    "RiskCountryService",
    "PovertyService",
    "CalendarService",
    "EventService",
    "FavoriteService",
    "UserSyncService",
    "ApiKeyService",
    "DashboardService",
    "RefreshService",
    "RefreshError",
]
