# =============================================================================
# core/services/labor_market_service.py - Labor Market Queries
# =============================================================================

import logging
import re

from app.exceptions import IndicatorNotFoundError
from core.models.indicators import (
    NATIONAL_REGION,
    DateRange,
    LaborMarketLatestResponse,
    LaborMarketMetadata,
    LaborMarketReading,
    Pagination,
    PeriodRange,
    SeriesResponse,
)
from core.services.query_helpers import (
    apply_date_bounds,
    filtered_by,
    normalize_date_bounds,
    page_window,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

LABOR_TABLE = "labor_market"
ALL_SEGMENTS = "Total"

RATE_FIELDS = ("unemployment_rate", "activity_rate", "employment_rate")
POPULATION_FIELDS = (
    "economically_active_population",
    "employed_population",
    "unemployed_population",
    "total_population",
    "inactive_population",
)

# Survey periods look like "T3 2024"
QUARTER_PERIOD = re.compile(r"T(\d)\s*(\d{4})")

DATA_SOURCE = "INDEC - Encuesta Permanente de Hogares (EPH)"
COVERAGE = "Argentina - 31 urban agglomerations"


def period_sort_key(period: str) -> tuple[int, int]:
    """(year, quarter) for a survey period; unparseable periods sort first."""
    match = QUARTER_PERIOD.search(period)
    if not match:
        return (0, 0)
    return (int(match.group(2)), int(match.group(1)))


def to_reading(item: dict) -> LaborMarketReading:
    numbers = {
        field: float(item.get(field) or 0)
        for field in RATE_FIELDS + POPULATION_FIELDS
    }
    return LaborMarketReading(
        date=item.get("date") or "",
        period=item.get("period"),
        region=item.get("region"),
        age_group=item.get("age_group"),
        gender=item.get("gender"),
        **numbers,
    )


class LaborMarketService:
    """Service for quarterly labor market rates."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_series(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        region: str | None = None,
        age_group: str | None = None,
        gender: str | None = None,
        limit: int = 100,
        page: int = 1,
        paginate: bool = True,
    ) -> SeriesResponse:
        start, end = normalize_date_bounds(start_date, end_date)

        query = apply_date_bounds(self.db.table(LABOR_TABLE).select("*", count="exact"), start, end)
        for column, value in (("region", region), ("age_group", age_group), ("gender", gender)):
            if value:
                query = query.eq(column, value)
        query = query.order("date", desc=True)
        if paginate:
            query = query.range(*page_window(page, limit))

        response = self.db.execute(query, "fetch labor market series")
        data = [to_reading(item).model_dump() for item in response.data or []]
        total = response.count if response.count is not None else len(data)

        return SeriesResponse(
            data=data,
            metadata={
                "count": len(data),
                "filtered_by": filtered_by(
                    start_date=start,
                    end_date=end,
                    region=region,
                    age_group=age_group,
                    gender=gender,
                ),
            },
            pagination=Pagination.build(page, limit, total) if paginate else None,
        )

    def get_latest(
        self,
        region: str | None = None,
        age_group: str | None = None,
        gender: str | None = None,
    ) -> LaborMarketLatestResponse:
        """
        Latest reading for one demographic segment. Unspecified dimensions
        default to the national aggregate and "Total".

        Raises:
            IndicatorNotFoundError: If the segment has no readings
        """
        criteria = {
            "region": region or NATIONAL_REGION,
            "age_group": age_group or ALL_SEGMENTS,
            "gender": gender or ALL_SEGMENTS,
        }
        query = self.db.table(LABOR_TABLE).select("*")
        for column, value in criteria.items():
            query = query.eq(column, value)

        item = self.db.fetch_first(query.order("date", desc=True), "fetch latest labor market")
        if not item:
            raise IndicatorNotFoundError("labor market", criteria)

        return LaborMarketLatestResponse(
            data=to_reading(item),
            metadata={
                "last_updated": item.get("updated_at") or item.get("created_at"),
                "period": item.get("period"),
                "region": item.get("region"),
                "demographics": {
                    "age_group": item.get("age_group"),
                    "gender": item.get("gender"),
                },
            },
        )

    def get_metadata(self) -> LaborMarketMetadata:
        """
        Available segments, indicators and coverage of the labor table.

        Raises:
            IndicatorNotFoundError: If the table is empty
        """
        rows = self.db.run(
            self.db.table(LABOR_TABLE).select(
                "date, period, region, age_group, gender, unemployment_rate, updated_at"
            ),
            "fetch labor market dimensions",
        )
        if not rows:
            raise IndicatorNotFoundError("labor market", {"metadata": True})

        def distinct(column: str) -> list[str]:
            return sorted({row[column] for row in rows if row.get(column)})

        dates = sorted(row["date"] for row in rows if row.get("date"))
        periods = sorted(distinct("period"), key=period_sort_key)
        updates = [row["updated_at"] for row in rows if row.get("updated_at")]

        return LaborMarketMetadata(
            regions=distinct("region"),
            age_groups=distinct("age_group"),
            genders=distinct("gender"),
            indicators=list(RATE_FIELDS + POPULATION_FIELDS),
            date_range=DateRange(
                first_date=dates[0] if dates else None,
                last_date=dates[-1] if dates else None,
            ),
            period_range=PeriodRange(first=periods[0], last=periods[-1]) if periods else None,
            metadata={
                "total_records": sum(1 for row in rows if row.get("unemployment_rate") is not None),
                "last_updated": max(updates) if updates else None,
                "data_source": DATA_SOURCE,
                "update_frequency": "quarterly",
                "coverage": COVERAGE,
            },
        )
