# =============================================================================
# core/services/emae_service.py - EMAE Queries
# =============================================================================
# Economic activity estimator (EMAE) data access:
# - General series (original, seasonally adjusted, trend-cycle)
# - Latest reading, general or for one activity sector
# - Sector historical rows with date / month / year filters
# - Sector breakdown snapshot for the latest published month
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.exceptions import IndicatorNotFoundError, InvalidQueryError
from core.models.indicators import (
    DateRange,
    EmaeLatest,
    EmaeMetadata,
    Pagination,
    Sector,
    SectorBreakdown,
    SectorBreakdownEntry,
    SeriesResponse,
)
from core.services.query_helpers import (
    apply_date_bounds,
    filtered_by,
    normalize_date_bounds,
    page_window,
    split_codes,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

GENERAL_SECTOR = "GENERAL"
EMAE_FIRST_DATE = "2004-01-01"

GENERAL_VIEW = "emae_with_variations"
ACTIVITY_TABLE = "emae_by_activity"
ACTIVITY_VIEW = "emae_by_activity_with_variations"


def months_between(start: str, end: str) -> int:
    """Whole months from start to end (both ISO dates), inclusive of both."""
    first, last = date.fromisoformat(start[:10]), date.fromisoformat(end[:10])
    return (last.year - first.year) * 12 + last.month - first.month + 1


class EmaeService:
    """
    Service for EMAE queries.

    Args:
        db: The injected Supabase client wrapper
    """

    def __init__(self, db: SupabaseClient):
        self.db = db

    # -------------------------------------------------------------------------
    # General Series
    # -------------------------------------------------------------------------

    def get_series(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 100,
        page: int = 1,
        paginate: bool = True,
    ) -> SeriesResponse:
        """
        Fetch the general EMAE series in chronological order.

        Args:
            start_date: Inclusive lower bound (YYYY-MM or YYYY-MM-DD)
            end_date: Inclusive upper bound
            limit: Rows per page
            page: 1-based page number
            paginate: False returns every matching row (CSV export)

        Returns:
            SeriesResponse with rows and pagination
        """
        start, end = normalize_date_bounds(start_date, end_date)
        first, last = page_window(page, limit)

        query = (
            self.db.table(GENERAL_VIEW)
            .select(
                "date, original_value, seasonally_adjusted_value, cycle_trend_value, "
                "monthly_pct_change, yearly_pct_change",
                count="exact",
            )
            .eq("sector_code", GENERAL_SECTOR)
        )
        query = apply_date_bounds(query, start, end).order("date")
        if paginate:
            query = query.range(first, last)
        response = self.db.execute(query, "fetch EMAE series")
        rows = response.data or []
        total = response.count if response.count is not None else len(rows)

        return SeriesResponse(
            data=rows,
            metadata={
                "count": len(rows),
                "filtered_by": filtered_by(start_date=start, end_date=end),
            },
            pagination=Pagination.build(page, limit, total),
        )

    def get_latest(self, sector_code: str = GENERAL_SECTOR, by_activity: bool = False) -> EmaeLatest:
        """
        Fetch the most recent EMAE reading.

        The general view also carries the seasonally adjusted and trend-cycle
        values; activity rows only have the original series.

        Raises:
            IndicatorNotFoundError: If no row matches the sector
        """
        sector_code = (sector_code or GENERAL_SECTOR).upper()
        view = ACTIVITY_VIEW if by_activity else GENERAL_VIEW

        query = self.db.table(view).select("*").order("date", desc=True)
        if sector_code != GENERAL_SECTOR or by_activity:
            query = query.eq("sector_code", sector_code)

        item = self.db.fetch_first(query, "fetch latest EMAE")
        if not item:
            raise IndicatorNotFoundError("EMAE", {"sector_code": sector_code, "by_activity": by_activity})

        result = EmaeLatest(
            date=item.get("date") or "",
            sector=item.get("sector") or "",
            sector_code=item.get("sector_code") or "",
            original_value=item.get("original_value") or 0,
            yearly_pct_change=item.get("yearly_pct_change"),
            monthly_pct_change=item.get("monthly_pct_change"),
        )
        if view == GENERAL_VIEW:
            result.seasonally_adjusted_value = item.get("seasonally_adjusted_value")
            result.trend_cycle_value = item.get("cycle_trend_value")
        return result

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def get_sector_catalog(self) -> list[Sector]:
        """Distinct activity sectors, in first-seen order."""
        rows = self.db.run(
            self.db.table(ACTIVITY_TABLE)
            .select("economy_sector, economy_sector_code")
            .order("date")
            .limit(100),
            "fetch EMAE sectors",
        )
        sectors: dict[str, str] = {}
        for row in rows:
            code, name = row.get("economy_sector_code"), row.get("economy_sector")
            if code and name:
                sectors[code] = name
        return [Sector(code=code, name=name) for code, name in sectors.items()]

    def get_metadata(self) -> EmaeMetadata:
        first, last = self.db.fetch_date_bounds(GENERAL_VIEW)
        return EmaeMetadata(
            sectors=self.get_sector_catalog(),
            date_range=DateRange(
                first_date=first,
                last_date=last,
                total_months=months_between(first, last) if first and last else 0,
            ),
            available_series={
                "general": ["original_value", "seasonally_adjusted_value", "cycle_trend_value"],
                "by_activity": ["original_value"],
            },
            metadata={
                "last_updated": last,
                "available_formats": ["json", "csv"],
                "endpoints": {
                    "main": "/api/emae",
                    "latest": "/api/emae/latest",
                    "sectors": "/api/emae/sectors",
                    "by_activity": "/api/emae/by-activity",
                    "metadata": "/api/emae/metadata",
                },
            },
        )

    # -------------------------------------------------------------------------
    # Sector Historical Data
    # -------------------------------------------------------------------------

    def get_sectors(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        sector_code: str | None = None,
        month: int | None = None,
        year: int | None = None,
        limit: int = 100,
        page: int = 1,
        paginate: bool = True,
    ) -> SeriesResponse:
        """
        Fetch activity-sector rows in chronological order.

        Date bounds and sector codes are applied in the database. Month and
        year filters are applied after fetching, so when they are present
        pagination happens in memory too.

        Args:
            sector_code: One code or a comma separated list
            month: 1-12, matches that month in any year unless year is given
            year: Four-digit year
            paginate: False returns every matching row (CSV export)
        """
        if month is not None and not 1 <= month <= 12:
            raise InvalidQueryError("month", month, "an integer between 1 and 12")

        start, end = normalize_date_bounds(start_date, end_date)
        codes = split_codes(sector_code)
        in_memory = month is not None or year is not None
        first, last = page_window(page, limit)

        query = (
            self.db.table(ACTIVITY_TABLE)
            .select("date, economy_sector, economy_sector_code, original_value", count="exact")
            .order("date")
        )
        query = apply_date_bounds(query, start, end)
        if len(codes) == 1:
            query = query.eq("economy_sector_code", codes[0])
        elif codes:
            query = query.in_("economy_sector_code", codes)
        if paginate and not in_memory:
            query = query.range(first, last)

        response = self.db.execute(query, "fetch EMAE sector data")
        rows = response.data or []

        if in_memory:
            rows = [row for row in rows if self._matches_period(row.get("date"), month, year)]
            total = len(rows)
            if paginate:
                rows = rows[first:last + 1]
        else:
            total = response.count if response.count is not None else len(rows)

        last_date = self._last_activity_date()
        return SeriesResponse(
            data=rows,
            metadata={
                "count": len(rows),
                "total_count": total,
                "date_range": {
                    "first_date": EMAE_FIRST_DATE,
                    "last_date": last_date,
                    "total_months": months_between(EMAE_FIRST_DATE, last_date) if last_date else 0,
                },
                "filtered_by": filtered_by(
                    start_date=start,
                    end_date=end,
                    month=month,
                    year=year,
                    sector_code=codes,
                ),
            },
            pagination=Pagination.build(page, limit, total),
        )

    @staticmethod
    def _matches_period(value: str | None, month: int | None, year: int | None) -> bool:
        if not value:
            return False
        parts = value[:10].split("-")
        if len(parts) != 3:
            return False
        item_year, item_month = int(parts[0]), int(parts[1])
        if month is not None and item_month != month:
            return False
        if year is not None and item_year != year:
            return False
        return True

    def _last_activity_date(self) -> str | None:
        row = self.db.fetch_first(
            self.db.table(ACTIVITY_TABLE).select("date").order("date", desc=True),
            "fetch last EMAE sector date",
        )
        return row.get("date") if row else None

    def get_by_activity(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        sector_code: str | None = None,
        group_by_sector: bool = False,
        limit: int = 100,
        page: int = 1,
    ) -> SeriesResponse:
        """
        Fetch raw activity rows, optionally grouped as one series per sector.

        Grouped output looks like:
            [{"sector_code": "A", "sector_name": "...", "data": [{"date": ..., "value": ...}]}]
        """
        start, end = normalize_date_bounds(start_date, end_date)
        first, last = page_window(page, limit)

        query = apply_date_bounds(self.db.table(ACTIVITY_TABLE).select("*"), start, end)
        if sector_code:
            query = query.eq("economy_sector_code", sector_code)
        if group_by_sector:
            query = query.order("economy_sector_code").order("date")
        else:
            query = query.order("date").order("economy_sector_code")

        rows = self.db.run(query.range(first, last), "fetch EMAE by activity")

        if group_by_sector:
            groups: dict[str, dict[str, Any]] = {}
            for row in rows:
                key = row.get("economy_sector_code") or "unknown"
                group = groups.setdefault(key, {
                    "sector_code": row.get("economy_sector_code"),
                    "sector_name": row.get("economy_sector"),
                    "data": [],
                })
                group["data"].append({"date": row.get("date"), "value": row.get("original_value")})
            data = list(groups.values())
        else:
            data = [
                {
                    "date": row.get("date"),
                    "economy_sector": row.get("economy_sector"),
                    "economy_sector_code": row.get("economy_sector_code"),
                    "original_value": row.get("original_value"),
                }
                for row in rows
            ]

        return SeriesResponse(
            data=data,
            metadata={
                "count": len(data),
                "page": page,
                "limit": limit,
                "group_by_sector": group_by_sector,
                "filtered_by": filtered_by(start_date=start, end_date=end, sector_code=sector_code),
            },
        )

    # -------------------------------------------------------------------------
    # Sector Breakdown
    # -------------------------------------------------------------------------

    def get_sector_breakdown(self) -> SectorBreakdown:
        """
        Fetch every sector for the latest published month.

        Returns an empty breakdown (date None) when there is no data yet.
        """
        latest = self.db.fetch_first(
            self.db.table(ACTIVITY_VIEW).select("date").order("date", desc=True),
            "fetch latest EMAE sector date",
        )
        if not latest or not latest.get("date"):
            return SectorBreakdown()

        rows = self.db.run(
            self.db.table(ACTIVITY_VIEW)
            .select("*")
            .eq("date", latest["date"])
            .neq("sector_code", GENERAL_SECTOR)
            .order("sector_code"),
            "fetch EMAE sector breakdown",
        )
        sectors = {
            row["sector_code"]: SectorBreakdownEntry(
                sector=row.get("sector"),
                value=row.get("original_value"),
                monthly_pct_change=row.get("monthly_pct_change"),
                yearly_pct_change=row.get("yearly_pct_change"),
                weight=row.get("weight"),
            )
            for row in rows
            if row.get("sector_code")
        }
        return SectorBreakdown(date=latest["date"], sectors=sectors)
