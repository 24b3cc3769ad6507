# =============================================================================
# core/services/calendar_service.py - Release Calendar Queries
# =============================================================================
# INDEC release calendar. Each entry gets a slug derived from its indicator
# name, which is also how /api/calendar/{slug} finds entries.
# =============================================================================

import calendar
import logging
from datetime import date
from typing import Any

from app.exceptions import InvalidQueryError
from core.models.calendar import CalendarEntry, CalendarResponse
from core.models.indicators import Pagination
from core.services.query_helpers import filtered_by, normalize_date_bounds, page_window
from lib.supabase_client import SupabaseClient
from lib.utils import slugify

logger = logging.getLogger(__name__)

CALENDAR_TABLE = "economic_calendar"
MAX_CALENDAR_LIMIT = 500


def month_bounds(month: int | None, year: int | None, today: date) -> tuple[str, str]:
    """
    Date window for month/year filters.

    A month without a year means that month of the current year; a year
    without a month means the whole year.
    """
    target_year = year if year is not None else today.year
    if month is None:
        return date(target_year, 1, 1).isoformat(), date(target_year, 12, 31).isoformat()
    last_day = calendar.monthrange(target_year, month)[1]
    return date(target_year, month, 1).isoformat(), date(target_year, month, last_day).isoformat()


def to_entry(item: dict[str, Any]) -> CalendarEntry:
    return CalendarEntry(
        id=item.get("id"),
        date=item.get("date") or "",
        day_week=item.get("day_week"),
        indicator=item.get("indicator") or "",
        period=item.get("period"),
        source=item.get("source"),
        slug=slugify(item.get("indicator") or ""),
    )


class CalendarService:
    """Service for the economic release calendar."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def list_entries(
        self,
        month: int | None = None,
        year: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 100,
        page: int = 1,
        today: date | None = None,
    ) -> CalendarResponse:
        """
        List calendar entries in date order.

        An explicit start_date takes precedence over month/year; end_date
        always applies.
        """
        if month is not None and not 1 <= month <= 12:
            raise InvalidQueryError("month", month, "an integer between 1 and 12")
        if limit > MAX_CALENDAR_LIMIT:
            raise InvalidQueryError("limit", limit, f"at most {MAX_CALENDAR_LIMIT}")

        start, end = normalize_date_bounds(start_date, end_date)
        query = self.db.table(CALENDAR_TABLE).select("*", count="exact")
        if start:
            query = query.gte("date", start)
        elif month is not None or year is not None:
            window_start, window_end = month_bounds(month, year, today or date.today())
            query = query.gte("date", window_start).lte("date", window_end)
        if end:
            query = query.lte("date", end)

        query = query.order("date").range(*page_window(page, limit))
        response = self.db.execute(query, "fetch economic calendar")
        entries = [to_entry(item) for item in response.data or []]
        total = response.count or 0

        return CalendarResponse(
            data=entries,
            metadata={
                "count": len(entries),
                "total_count": total,
                "filtered_by": filtered_by(month=month, year=year, start_date=start, end_date=end),
            },
            pagination=Pagination.build(page, limit, total),
        )

    def get_by_slug(self, slug: str) -> list[CalendarEntry]:
        """
        Entries whose indicator slugifies to `slug`, in date order.

        Slugs are not stored, so matching happens after fetching.
        """
        rows = self.db.run(
            self.db.table(CALENDAR_TABLE).select("*").order("date"),
            "fetch calendar by indicator",
        )
        return [entry for entry in map(to_entry, rows) if entry.slug == slug]
