# =============================================================================
# core/services/risk_country_service.py - Country Risk Queries
# =============================================================================
# Country risk (EMBI spread) daily closings from v_embi_daily_closing.
#
# Range types map to closing_date windows relative to today:
#   latest        -> single most recent close
#   last_N_days   -> closing_date >= today - N days
#   year_to_date  -> closing_date >= Jan 1 of this year
#   last_year     -> all of last calendar year
#   custom        -> [date_from, date_to], both required
#
# Summary statistics are computed with pandas over the returned rows.
# =============================================================================

import logging
from datetime import date, timedelta
from typing import Any

import pandas as pd

from app.exceptions import IndicatorNotFoundError, InvalidQueryError
from core.models.indicators import RiskCountryLatest, RiskCountryResponse, RiskRangeType
from core.services.query_helpers import normalize_date_bounds
from lib.supabase_client import SupabaseClient
from lib.utils import pct_change, shift_months

logger = logging.getLogger(__name__)

CLOSING_VIEW = "v_embi_daily_closing"
MAX_LIMIT = 1000

# Tolerance around a reference date when looking for a comparable close
REFERENCE_WINDOW = timedelta(days=7)

RANGE_DAYS = {
    RiskRangeType.LAST_7_DAYS: 7,
    RiskRangeType.LAST_30_DAYS: 30,
    RiskRangeType.LAST_90_DAYS: 90,
}


def range_bounds(
    range_type: RiskRangeType,
    today: date,
    date_from: str | None = None,
    date_to: str | None = None,
) -> tuple[str | None, str | None]:
    """Resolve a range type to (from, to) ISO dates. Both None for latest."""
    if range_type in RANGE_DAYS:
        return (today - timedelta(days=RANGE_DAYS[range_type])).isoformat(), today.isoformat()
    if range_type == RiskRangeType.YEAR_TO_DATE:
        return date(today.year, 1, 1).isoformat(), today.isoformat()
    if range_type == RiskRangeType.LAST_YEAR:
        return f"{today.year - 1}-01-01", f"{today.year - 1}-12-31"
    if range_type == RiskRangeType.CUSTOM:
        return date_from, date_to
    return None, None


def calculate_stats(rows: list[dict[str, Any]]) -> dict[str, Any] | None:
    """
    Summary statistics for a set of closings.

    The first row is treated as the latest and the last row as the oldest,
    so rows are expected newest first.
    """
    if not rows:
        return None

    frame = pd.DataFrame(rows)
    values = frame["closing_value"].dropna() if "closing_value" in frame else pd.Series(dtype=float)
    if values.empty:
        return None

    latest, oldest = rows[0], rows[-1]
    latest_value, oldest_value = latest.get("closing_value"), oldest.get("closing_value")

    period_change = None
    if latest_value is not None and oldest_value is not None:
        percentage = pct_change(latest_value, oldest_value) if oldest_value > 0 else None
        period_change = {
            "absolute": latest_value - oldest_value,
            "percentage": round(percentage, 2) if percentage is not None else None,
        }

    volatility = None
    changes = frame["change_percentage"].dropna() if "change_percentage" in frame else pd.Series(dtype=float)
    if not changes.empty:
        increases, decreases = changes[changes > 0], changes[changes < 0]
        volatility = {
            "avg_daily_change": round(float(changes.mean()), 2),
            "max_daily_increase": float(increases.max()) if not increases.empty else None,
            "max_daily_decrease": float(decreases.min()) if not decreases.empty else None,
        }

    return {
        "latest_value": latest_value,
        "latest_date": latest.get("closing_date"),
        "latest_change": latest.get("change_percentage"),
        "min_value": float(values.min()),
        "max_value": float(values.max()),
        "avg_value": round(float(values.mean()), 2),
        "total_records": len(rows),
        "period_change": period_change,
        "volatility": volatility,
    }


class RiskCountryService:
    """Service for country risk closings."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_range(
        self,
        range_type: RiskRangeType = RiskRangeType.LAST_30_DAYS,
        date_from: str | None = None,
        date_to: str | None = None,
        limit: int | None = None,
        order: str = "desc",
        today: date | None = None,
    ) -> RiskCountryResponse:
        """
        Fetch closings for a range type, with summary statistics.

        Raises:
            InvalidQueryError: custom without both bounds, bad limit or order
        """
        if range_type == RiskRangeType.CUSTOM and (not date_from or not date_to):
            raise InvalidQueryError("type", range_type.value, "date_from and date_to when type is custom")
        if limit is not None and not 1 <= limit <= MAX_LIMIT:
            raise InvalidQueryError("limit", limit, f"an integer between 1 and {MAX_LIMIT}")
        if order not in ("asc", "desc"):
            raise InvalidQueryError("order", order, "asc or desc")

        date_from, date_to = normalize_date_bounds(date_from, date_to)
        today = today or date.today()
        start, end = range_bounds(range_type, today, date_from, date_to)

        query = self.db.table(CLOSING_VIEW).select("*")
        if range_type == RiskRangeType.LATEST:
            query = query.order("closing_date", desc=True).limit(1)
        else:
            if start:
                query = query.gte("closing_date", start)
            # Relative windows run to the newest close, so only fixed ranges get an upper bound
            if range_type in (RiskRangeType.LAST_YEAR, RiskRangeType.CUSTOM):
                query = query.lte("closing_date", end)
            query = query.order("closing_date", desc=order == "desc")
            if limit:
                query = query.limit(limit)

        rows = self.db.run(query, f"fetch country risk ({range_type.value})")

        return RiskCountryResponse(
            data=rows,
            meta={
                "type": range_type.value,
                "total_records": len(rows),
                "date_range": {"from": start, "to": end} if start or end else {"description": "Latest available value"},
                "order": order,
                "limit": limit,
            },
            stats=calculate_stats(rows),
        )

    def _closest_close(self, reference: date) -> dict[str, Any] | None:
        """Most recent close within REFERENCE_WINDOW of a reference date."""
        return self.db.fetch_first(
            self.db.table(CLOSING_VIEW)
            .select("*")
            .gte("closing_date", (reference - REFERENCE_WINDOW).isoformat())
            .lte("closing_date", (reference + REFERENCE_WINDOW).isoformat())
            .order("closing_date", desc=True),
            "fetch reference country risk",
        )

    def get_latest_with_variations(self) -> RiskCountryLatest:
        """
        Latest close with monthly and yearly variation in percent.

        References are the closest closes within a week of one month and one
        year before the latest date; a variation is None when no reference
        close exists.

        Raises:
            IndicatorNotFoundError: If there are no closings
        """
        latest = self.db.fetch_first(
            self.db.table(CLOSING_VIEW).select("*").order("closing_date", desc=True),
            "fetch latest country risk",
        )
        if not latest or not latest.get("closing_date"):
            raise IndicatorNotFoundError("country risk", {"view": CLOSING_VIEW})

        current = date.fromisoformat(latest["closing_date"][:10])
        month_ago = shift_months(current, -1).replace(day=min(current.day, 28))
        year_ago = current.replace(year=current.year - 1, day=min(current.day, 28))

        monthly = self._closest_close(month_ago)
        yearly = self._closest_close(year_ago)
        value = latest.get("closing_value")

        return RiskCountryLatest(
            closing_date=latest["closing_date"],
            closing_value=value or 0,
            change_percentage=latest.get("change_percentage"),
            monthly_variation=pct_change(value, monthly.get("closing_value")) if monthly else None,
            yearly_variation=pct_change(value, yearly.get("closing_value")) if yearly else None,
            monthly_reference_date=monthly.get("closing_date") if monthly else None,
            yearly_reference_date=yearly.get("closing_date") if yearly else None,
        )
