# =============================================================================
# core/models/calendar.py - Calendar & Event Schemas
# =============================================================================
# - CalendarEntry: A scheduled INDEC release (indicator + period + date)
# - Event / EventPrediction: Prediction events users can take part in
#
# Both carry a slug derived from their display name; see lib.utils.slugify.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .indicators import Pagination


class CalendarEntry(BaseModel):
    """One row of the economic release calendar."""
    id: int | None = None
    date: str
    day_week: str | None = None
    indicator: str
    period: str | None = None
    source: str | None = None
    slug: str = Field(..., description="slugify(indicator)")


class CalendarResponse(BaseModel):
    data: list[CalendarEntry]
    metadata: dict[str, Any]
    pagination: Pagination


class EventCreate(BaseModel):
    """
    Schema for creating an event (admin only).

    The slug is never supplied by the client; it is derived from `name`.
    """
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    event_date: str | None = Field(default=None, description="YYYY-MM-DD")
    indicator_type: str | None = None


class Event(BaseModel):
    id: Any = None
    name: str
    slug: str
    description: str | None = None
    event_date: str | None = None
    indicator_type: str | None = None
    status: str | None = None
    participant_count: int | None = None


class EventPrediction(BaseModel):
    id: Any = None
    event_id: Any = None
    user_id: Any = None
    predicted_value: float | None = None
    created_at: str | None = None


class EventDetail(BaseModel):
    event: Event
    predictions: list[EventPrediction] = Field(default_factory=list)
