# =============================================================================
# core/services/dollar_service.py - Dollar Quote Queries
# =============================================================================
# Buy/sell quotes per dollar market type, stored one row per (date, type)
# in dollar_rates.
# =============================================================================

import logging
from typing import Any

from app.exceptions import IndicatorNotFoundError
from core.models.indicators import (
    DateRange,
    DollarLatestResponse,
    DollarMetadata,
    DollarQuote,
    DollarType,
    Pagination,
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

DOLLAR_TABLE = "dollar_rates"


def spread_percent(buy_price: float, sell_price: float) -> float | None:
    """Sell over buy difference as a percentage of buy, rounded to 2 places."""
    if not buy_price:
        return None
    return round((sell_price - buy_price) / buy_price * 100, 2)


def to_quote(item: dict[str, Any], with_spread: bool = False) -> DollarQuote:
    buy, sell = float(item.get("buy_price") or 0), float(item.get("sell_price") or 0)
    return DollarQuote(
        date=item.get("date") or "",
        dollar_type=item.get("dollar_type") or "",
        buy_price=buy,
        sell_price=sell,
        spread=spread_percent(buy, sell) if with_spread else None,
        last_updated=item.get("created_at"),
    )


class DollarService:
    """Service for dollar quote queries."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_series(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        dollar_type: str | None = None,
        limit: int = 100,
        page: int = 1,
        paginate: bool = True,
    ) -> SeriesResponse:
        """
        Fetch quotes newest first, ordered by type within a date.

        Args:
            dollar_type: One type or a comma separated list, any case
        """
        start, end = normalize_date_bounds(start_date, end_date)
        types = [t.upper() for t in split_codes(dollar_type)]

        query = apply_date_bounds(self.db.table(DOLLAR_TABLE).select("*", count="exact"), start, end)
        if len(types) == 1:
            query = query.eq("dollar_type", types[0])
        elif types:
            query = query.in_("dollar_type", types)
        query = query.order("date", desc=True).order("dollar_type")
        if paginate:
            query = query.range(*page_window(page, limit))

        response = self.db.execute(query, "fetch dollar rates")
        rows = response.data or []
        data = [to_quote(item).model_dump(exclude={"spread"}) for item in rows]
        total = response.count if response.count is not None else len(data)

        return SeriesResponse(
            data=data,
            metadata={
                "count": len(data),
                "filtered_by": filtered_by(start_date=start, end_date=end, dollar_type=types),
            },
            pagination=Pagination.build(page, limit, total) if paginate else None,
        )

    def get_latest(self, dollar_type: str | None = None) -> DollarLatestResponse:
        """
        Fetch the latest quote for one type, or every type quoted on the
        latest date.

        Raises:
            IndicatorNotFoundError: If there are no quotes
        """
        if dollar_type:
            kind = dollar_type.upper()
            rows = self.db.run(
                self.db.table(DOLLAR_TABLE)
                .select("*")
                .eq("dollar_type", kind)
                .order("date", desc=True)
                .limit(1),
                "fetch latest dollar rate",
            )
        else:
            kind = "ALL"
            latest = self.db.fetch_first(
                self.db.table(DOLLAR_TABLE).select("date").order("date", desc=True),
                "fetch latest dollar date",
            )
            rows = []
            if latest:
                rows = self.db.run(
                    self.db.table(DOLLAR_TABLE)
                    .select("*")
                    .eq("date", latest["date"])
                    .order("dollar_type"),
                    "fetch latest dollar rates",
                )

        if not rows:
            raise IndicatorNotFoundError("dollar", {"dollar_type": kind})

        quotes = [to_quote(item, with_spread=True) for item in rows]
        return DollarLatestResponse(
            data=quotes,
            metadata={"count": len(quotes), "dollar_type": kind},
        )

    def get_metadata(self) -> DollarMetadata:
        rows = self.db.run(
            self.db.table(DOLLAR_TABLE).select("dollar_type").order("dollar_type"),
            "fetch dollar types",
        )
        stored = {row["dollar_type"] for row in rows if row.get("dollar_type")}
        first, last = self.db.fetch_date_bounds(DOLLAR_TABLE)
        return DollarMetadata(
            dollar_types=sorted(stored) or [t.value for t in DollarType],
            date_range=DateRange(first_date=first, last_date=last),
        )
