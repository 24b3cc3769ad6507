# =============================================================================
# core/services/dashboard_service.py - Home Page KPIs
# =============================================================================
# Fetches the four headline indicators concurrently. The Supabase client is
# synchronous, so each query runs in a worker thread via asyncio.to_thread
# and the four are awaited together with asyncio.gather.
#
# All or nothing: if any of the four queries fails, the caller gets the
# empty summary (every key None) and the error is logged.
# =============================================================================

import asyncio
import logging

from app.exceptions import IndicatorNotFoundError
from core.models.dashboard import DollarKPI, EmaeKPI, IpcKPI, KPISummary, RiskCountryKPI
from core.services.emae_service import GENERAL_SECTOR, GENERAL_VIEW
from core.services.ipc_service import DEFAULT_REGION, GENERAL_CATEGORY, IPC_VIEW
from core.services.dollar_service import DOLLAR_TABLE
from core.services.risk_country_service import RiskCountryService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

HEADLINE_DOLLAR = "OFICIAL"


class DashboardService:
    """Composite KPI fetch for the dashboard."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    # -------------------------------------------------------------------------
    # Individual KPIs (blocking)
    # -------------------------------------------------------------------------

    def fetch_emae(self) -> EmaeKPI | None:
        row = self.db.fetch_first(
            self.db.table(GENERAL_VIEW)
            .select("date, original_value, monthly_pct_change, yearly_pct_change")
            .eq("sector_code", GENERAL_SECTOR)
            .order("date", desc=True),
            "fetch EMAE KPI",
        )
        return EmaeKPI(**row) if row else None

    def fetch_ipc(self) -> IpcKPI | None:
        row = self.db.fetch_first(
            self.db.table(IPC_VIEW)
            .select("date, monthly_pct_change, yearly_pct_change, accumulated_pct_change")
            .eq("component_code", GENERAL_CATEGORY)
            .eq("region", DEFAULT_REGION)
            .order("date", desc=True),
            "fetch IPC KPI",
        )
        if not row:
            return None
        return IpcKPI(
            date=row.get("date"),
            monthly_change=row.get("monthly_pct_change"),
            year_over_year_change=row.get("yearly_pct_change"),
            accumulated_change=row.get("accumulated_pct_change"),
        )

    def fetch_dollar(self) -> DollarKPI | None:
        row = self.db.fetch_first(
            self.db.table(DOLLAR_TABLE)
            .select("date, sell_price, buy_price")
            .eq("dollar_type", HEADLINE_DOLLAR)
            .order("date", desc=True),
            "fetch dollar KPI",
        )
        return DollarKPI(**row) if row else None

    def fetch_risk_country(self) -> RiskCountryKPI | None:
        try:
            latest = RiskCountryService(self.db).get_latest_with_variations()
        except IndicatorNotFoundError:
            return None
        return RiskCountryKPI(**latest.model_dump(exclude={"monthly_reference_date", "yearly_reference_date"}))

    # -------------------------------------------------------------------------
    # Composite
    # -------------------------------------------------------------------------

    async def get_kpis(self) -> KPISummary:
        """
        Fetch EMAE, IPC, dollar and country risk concurrently.

        Returns:
            KPISummary; all fields None if any query failed
        """
        try:
            emae, ipc, dollar, risk_country = await asyncio.gather(
                asyncio.to_thread(self.fetch_emae),
                asyncio.to_thread(self.fetch_ipc),
                asyncio.to_thread(self.fetch_dollar),
                asyncio.to_thread(self.fetch_risk_country),
            )
        except Exception as e:
            logger.error(f"Error fetching dashboard KPIs: {e}")
            return KPISummary()

        return KPISummary(emae=emae, ipc=ipc, dollar=dollar, risk_country=risk_country)
