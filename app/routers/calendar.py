# =============================================================================
# app/routers/calendar.py - Release Calendar Endpoints
# =============================================================================
# Mounted at /api/calendar.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel

from app.dependencies import DatabaseDep
from core.models.calendar import CalendarEntry, CalendarResponse
from core.services.calendar_service import MAX_CALENDAR_LIMIT, CalendarService

router = APIRouter()


class CalendarSlugResponse(BaseModel):
    data: list[CalendarEntry]
    metadata: dict


@router.get("", response_model=CalendarResponse)
async def list_calendar(
    db: DatabaseDep,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    year: Annotated[int | None, Query(ge=1900, le=2100)] = None,
    start_date: str | None = None,
    end_date: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_CALENDAR_LIMIT)] = 100,
):
    """
    Scheduled releases in date order.

    start_date overrides month/year; a month without a year means the
    current year.
    """
    return CalendarService(db).list_entries(month, year, start_date, end_date, limit=limit, page=page)


@router.get("/{slug}", response_model=CalendarSlugResponse)
async def get_calendar_by_slug(
    db: DatabaseDep,
    slug: Annotated[str, Path(description="Indicator slug", examples=["indice-de-precios-al-consumidor"])],
):
    """All scheduled releases of one indicator."""
    entries = CalendarService(db).get_by_slug(slug)
    return CalendarSlugResponse(data=entries, metadata={"count": len(entries), "slug": slug})
