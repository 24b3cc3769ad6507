# =============================================================================
# core/services/poverty_service.py - Poverty & Indigence Queries
# =============================================================================

import logging

from app.exceptions import IndicatorNotFoundError, InvalidQueryError
from core.models.indicators import (
    NATIONAL_REGION,
    PovertyComparisonResponse,
    PovertyComparisonType,
    PovertyLatestResponse,
    SeriesResponse,
)
from core.services.query_helpers import apply_date_bounds, normalize_date_bounds, split_codes
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

POVERTY_TABLE = "poverty_data"
REGIONAL_LIMIT = 10

# Source tables of the semester report that carry the headline rates
SERIES_SOURCES = ["Cuadro 1", "Cuadro 4.3", "Cuadro 4.4"]

# Rows that hold one region or the national aggregate, as opposed to
# breakdowns by age or household type
COMPARABLE_DATA_TYPES = ["regional", "national"]

RATE_COLUMNS = (
    "poverty_rate_persons",
    "poverty_rate_households",
    "indigence_rate_persons",
    "indigence_rate_households",
)


class PovertyService:
    """Service for semester poverty and indigence rates."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_latest(self, region: str | None = None) -> PovertyLatestResponse:
        """
        Latest poverty reading.

        With a region, returns that region's row. Without one, returns the
        national aggregate plus the most recent regional rows.

        Raises:
            IndicatorNotFoundError: If there is no matching row
        """
        if region:
            item = self.db.fetch_first(
                self.db.table(POVERTY_TABLE).select("*").eq("region", region).order("date", desc=True),
                "fetch latest regional poverty",
            )
            if not item:
                raise IndicatorNotFoundError("poverty", {"region": region})
            return PovertyLatestResponse(
                data=item,
                metadata={"region": region, "last_updated": item.get("date"), "period": item.get("period")},
            )

        national = self.db.fetch_first(
            self.db.table(POVERTY_TABLE).select("*").eq("region", NATIONAL_REGION).order("date", desc=True),
            "fetch latest national poverty",
        )
        if not national:
            raise IndicatorNotFoundError("poverty", {"region": NATIONAL_REGION})

        regional = self.db.run(
            self.db.table(POVERTY_TABLE)
            .select("*")
            .neq("region", NATIONAL_REGION)
            .order("date", desc=True)
            .limit(REGIONAL_LIMIT),
            "fetch latest regional poverty",
        )
        return PovertyLatestResponse(
            data={"national": national, "regional": regional},
            metadata={
                "last_updated": national.get("date"),
                "period": national.get("period"),
                "regions_count": len(regional),
            },
        )

    def get_series(
        self,
        region: str | None = None,
        indicator: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> SeriesResponse:
        """
        Poverty series in chronological order.

        Args:
            indicator: One of the rate columns; when given, each row carries
                that rate as `value` and rows without it are dropped
        """
        if indicator and indicator not in RATE_COLUMNS:
            raise InvalidQueryError("indicator", indicator, f"one of {', '.join(RATE_COLUMNS)}")

        start, end = normalize_date_bounds(start_date, end_date)
        region_name = region or NATIONAL_REGION

        query = (
            self.db.table(POVERTY_TABLE)
            .select("date, period, year, semester, " + ", ".join(RATE_COLUMNS))
            .eq("region", region_name)
        )
        query = apply_date_bounds(query, start, end)
        query = query.in_("cuadro_source", SERIES_SOURCES).order("date")
        rows = self.db.run(query, "fetch poverty series")

        data = rows
        if indicator:
            data = [
                {
                    "date": row.get("date"),
                    "period": row.get("period"),
                    "year": row.get("year"),
                    "semester": row.get("semester"),
                    "value": row.get(indicator),
                }
                for row in rows
                if row.get(indicator) is not None
            ]

        return SeriesResponse(
            data=data,
            metadata={
                "count": len(data),
                "region": region_name,
                "indicator": indicator or "all",
                "date_range": {"start": rows[0].get("date"), "end": rows[-1].get("date")} if rows else None,
            },
        )

    def compare(
        self,
        comparison: PovertyComparisonType = PovertyComparisonType.REGIONAL,
        period: str | None = None,
        regions: str | None = None,
    ) -> PovertyComparisonResponse:
        """
        Compare poverty across regions or across semesters.

        Args:
            comparison: regional or temporal
            period: Semester for a regional comparison; defaults to the latest
            regions: Comma separated regions for a temporal comparison;
                defaults to the national aggregate
        """
        if comparison == PovertyComparisonType.TEMPORAL:
            return self._compare_over_time(split_codes(regions) or [NATIONAL_REGION])
        return self._compare_regions(period)

    def _compare_regions(self, period: str | None) -> PovertyComparisonResponse:
        if not period:
            latest = self.db.fetch_first(
                self.db.table(POVERTY_TABLE)
                .select("period")
                .in_("data_type", COMPARABLE_DATA_TYPES)
                .order("date", desc=True),
                "fetch latest poverty period",
            )
            period = latest.get("period") if latest else None

        query = (
            self.db.table(POVERTY_TABLE)
            .select("region, period, date, " + ", ".join(RATE_COLUMNS))
            .in_("data_type", COMPARABLE_DATA_TYPES)
        )
        if period:
            query = query.eq("period", period)
        rows = self.db.run(query.order("poverty_rate_persons", desc=True), "fetch poverty comparison")

        national = next((row for row in rows if row.get("region") == NATIONAL_REGION), None)
        national_rate = (national or {}).get("poverty_rate_persons")
        ranked = [
            {
                **row,
                "poverty_rank": rank,
                "above_national": (row.get("poverty_rate_persons") or 0) > (national_rate or 0),
            }
            for rank, row in enumerate(rows, start=1)
        ]
        return PovertyComparisonResponse(
            data=ranked,
            metadata={
                "type": PovertyComparisonType.REGIONAL.value,
                "period": rows[0].get("period") if rows else period,
                "date": rows[0].get("date") if rows else None,
                "regions_count": len(rows),
                "national_average": national_rate,
            },
        )

    def _compare_over_time(self, regions: list[str]) -> PovertyComparisonResponse:
        rows = self.db.run(
            self.db.table(POVERTY_TABLE)
            .select("*")
            .in_("region", regions)
            .in_("cuadro_source", SERIES_SOURCES)
            .order("date"),
            "fetch poverty comparison over time",
        )
        grouped = {region: [row for row in rows if row.get("region") == region] for region in regions}
        return PovertyComparisonResponse(
            data=grouped,
            metadata={
                "type": PovertyComparisonType.TEMPORAL.value,
                "regions": regions,
                "periods_count": len(rows),
                "date_range": {"start": rows[0].get("date"), "end": rows[-1].get("date")} if rows else None,
            },
        )
