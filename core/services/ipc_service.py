# =============================================================================
# core/services/ipc_service.py - IPC Queries
# =============================================================================
# Consumer price index (IPC) data access. All reads go through the
# ipc_with_variations view, which already carries monthly, yearly and
# accumulated percentage changes.
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.exceptions import IndicatorNotFoundError
from core.models.indicators import (
    DateRange,
    IpcLatest,
    IpcLatestResponse,
    IpcMetadata,
    Pagination,
    SeriesResponse,
)
from core.services.query_helpers import (
    apply_date_bounds,
    filtered_by,
    normalize_date_bounds,
    page_window,
)
from lib.supabase_client import SupabaseClient
from lib.utils import shift_months

logger = logging.getLogger(__name__)

IPC_VIEW = "ipc_with_variations"
GENERAL_CATEGORY = "GENERAL"
DEFAULT_REGION = "Nacional"


def normalize_region(region: str | None) -> str:
    """
    Stored region names are capitalized, except GBA which is all caps.

    Example:
        normalize_region("patagonia")  # "Patagonia"
        normalize_region("gba")        # "GBA"
    """
    if not region:
        return DEFAULT_REGION
    if region.lower() == "gba":
        return "GBA"
    return region[:1].upper() + region[1:].lower()


def months_before(value: str, months: int) -> str:
    """First day of the month `months` before an ISO date."""
    return shift_months(date.fromisoformat(value[:10]), -months).isoformat()


def to_ipc_reading(item: dict[str, Any], include_variations: bool = True) -> IpcLatest:
    reading = IpcLatest(
        date=item.get("date") or "",
        category=item.get("component") or "",
        category_code=item.get("component_code") or "",
        category_type=item.get("component_type") or "",
        index_value=item.get("index_value") or 0,
        region=item.get("region") or "",
    )
    if include_variations:
        reading.monthly_pct_change = item.get("monthly_pct_change")
        reading.yearly_pct_change = item.get("yearly_pct_change")
        reading.accumulated_pct_change = item.get("accumulated_pct_change")
    return reading


class IpcService:
    """Service for IPC queries."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_series(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        category: str | None = None,
        component_type: str | None = None,
        region: str | None = None,
        month: int | None = None,
        year: int | None = None,
        include_variations: bool = True,
        limit: int = 100,
        page: int = 1,
        paginate: bool = True,
    ) -> SeriesResponse:
        """
        Fetch an IPC series, newest first.

        Args:
            category: Component code, GENERAL by default
            component_type: Optional component type filter (e.g. RUBRO)
            region: Region name in any case, Nacional by default
            include_variations: False drops the percentage change columns
            paginate: False returns every matching row (CSV export)
        """
        start, end = normalize_date_bounds(start_date, end_date)
        category_code = (category or GENERAL_CATEGORY).upper()
        region_name = normalize_region(region)

        query = apply_date_bounds(self.db.table(IPC_VIEW).select("*", count="exact"), start, end)
        if component_type:
            query = query.eq("component_type", component_type.upper())
        query = query.eq("component_code", category_code).eq("region", region_name)
        if month is not None:
            query = query.eq("month", month)
        if year is not None:
            query = query.eq("year", year)
        query = query.order("date", desc=True)
        if paginate:
            query = query.range(*page_window(page, limit))

        response = self.db.execute(query, "fetch IPC series")
        rows = response.data or []
        data = [
            to_ipc_reading(item, include_variations).model_dump(exclude_none=True)
            for item in rows
        ]
        total = response.count if response.count is not None else len(data)

        return SeriesResponse(
            data=data,
            metadata={
                "count": len(data),
                "filtered_by": filtered_by(
                    start_date=start,
                    end_date=end,
                    month=month,
                    year=year,
                    component_type=component_type,
                    component_code=category_code,
                    region=region_name,
                ),
                "include_variations": include_variations,
            },
            pagination=Pagination.build(page, limit, total) if paginate else None,
        )

    def _reading_for(self, category_code: str, region: str, date: str) -> dict[str, Any] | None:
        return self.db.fetch_first(
            self.db.table(IPC_VIEW)
            .select("*")
            .eq("component_code", category_code)
            .eq("region", region)
            .eq("date", date),
            "fetch IPC reading",
        )

    def get_latest(self, category: str | None = None, region: str | None = None) -> IpcLatestResponse:
        """
        Fetch the latest IPC reading.

        monthly_change_variation is the difference between this month's and
        last month's monthly change, in percentage points; it stays 0 when the
        previous two months are not both available.

        Raises:
            IndicatorNotFoundError: If nothing matches category and region
        """
        category_code = (category or GENERAL_CATEGORY).upper()
        region_name = normalize_region(region)

        latest = self.db.fetch_first(
            self.db.table(IPC_VIEW)
            .select("*")
            .eq("component_code", category_code)
            .eq("region", region_name)
            .order("date", desc=True),
            "fetch latest IPC",
        )
        if not latest:
            raise IndicatorNotFoundError("IPC", {"category": category_code, "region": region_name})

        reading = to_ipc_reading(latest)
        previous = self._reading_for(category_code, region_name, months_before(latest["date"], 1))
        before_previous = self._reading_for(category_code, region_name, months_before(latest["date"], 2))

        if (
            previous and previous.get("monthly_pct_change") is not None
            and before_previous and before_previous.get("monthly_pct_change") is not None
        ):
            reading.monthly_change_variation = (
                (latest.get("monthly_pct_change") or 0) - previous["monthly_pct_change"]
            )

        return IpcLatestResponse(
            data=reading,
            metadata={"region": region_name, "component_code": category_code},
        )

    def get_metadata(self) -> IpcMetadata:
        """Components grouped by type, available regions, and date range."""
        rows = self.db.run(
            self.db.table(IPC_VIEW).select("component, component_code, component_type, region"),
            "fetch IPC components",
        )
        regions: set[str] = set()
        components: dict[tuple[str, str], dict[str, str]] = {}
        for row in rows:
            if row.get("region"):
                regions.add(row["region"])
            code, kind = row.get("component_code"), row.get("component_type")
            if code and kind and (kind, code) not in components:
                components[(kind, code)] = {
                    "type": kind,
                    "code": code,
                    "name": row.get("component") or "",
                }

        first, last = self.db.fetch_date_bounds(IPC_VIEW)
        return IpcMetadata(
            components=list(components.values()),
            regions=sorted(regions),
            date_range=DateRange(first_date=first, last_date=last),
        )

    def get_categories(self, region: str | None = None) -> SeriesResponse:
        """Every component for the latest published month in one region."""
        region_name = normalize_region(region)
        latest = self.db.fetch_first(
            self.db.table(IPC_VIEW).select("date").eq("region", region_name).order("date", desc=True),
            "fetch latest IPC date",
        )
        if not latest:
            return SeriesResponse(metadata={"count": 0, "region": region_name, "date": None})

        rows = self.db.run(
            self.db.table(IPC_VIEW)
            .select("*")
            .eq("region", region_name)
            .eq("date", latest["date"])
            .order("component_code"),
            "fetch IPC categories",
        )
        data = [to_ipc_reading(item).model_dump(exclude_none=True) for item in rows]
        return SeriesResponse(
            data=data,
            metadata={"count": len(data), "region": region_name, "date": latest["date"]},
        )
