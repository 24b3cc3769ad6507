# =============================================================================
# core/services/event_service.py - Prediction Events
# =============================================================================
# Events are forecasting rounds users submit predictions to. Each event is
# addressed by a slug generated from its name at creation time.
# =============================================================================

import logging

from app.exceptions import EventExistsError, EventNotFoundError, InvalidQueryError
from core.models.calendar import Event, EventCreate, EventDetail, EventPrediction
from lib.supabase_client import SupabaseClient
from lib.utils import generate_event_slug

logger = logging.getLogger(__name__)

EVENTS_TABLE = "events"
PREDICTIONS_TABLE = "event_predictions"
OPEN_STATUS = "open"


class EventService:
    """Service for prediction events."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def list_events(self, status: str | None = None) -> list[Event]:
        """Events by date, each with its number of predictions."""
        query = self.db.table(EVENTS_TABLE).select(f"*, {PREDICTIONS_TABLE}(count)")
        if status:
            query = query.eq("status", status)
        rows = self.db.run(query.order("event_date"), "fetch events")

        events = []
        for row in rows:
            # Embedded count arrives as [{"count": n}]
            counts = row.pop(PREDICTIONS_TABLE, None) or [{}]
            events.append(Event(**{**row, "participant_count": counts[0].get("count") or 0}))
        return events

    def get_event(self, slug: str) -> EventDetail:
        """
        Fetch one event and its predictions, newest first.

        Raises:
            EventNotFoundError: If no event has this slug
        """
        row = self.db.fetch_first(
            self.db.table(EVENTS_TABLE).select("*").eq("slug", slug),
            "fetch event",
        )
        if not row:
            raise EventNotFoundError(slug)

        predictions = self.db.run(
            self.db.table(PREDICTIONS_TABLE)
            .select("*")
            .eq("event_id", row.get("id"))
            .order("created_at", desc=True),
            "fetch event predictions",
        )
        return EventDetail(
            event=Event(**row),
            predictions=[EventPrediction(**item) for item in predictions],
        )

    def create_event(self, event: EventCreate) -> Event:
        """
        Insert an event; its slug is always derived from the name.

        Raises:
            InvalidQueryError: If the name has no letters or digits to slug
            EventExistsError: If another event already has the same slug
        """
        slug = generate_event_slug(event.name)
        if not slug:
            raise InvalidQueryError("name", event.name, "at least one letter or digit")

        data = event.model_dump()
        data["slug"] = slug
        data["status"] = OPEN_STATUS

        row = self.db.insert_event(data)
        if row is None:
            raise EventExistsError(slug)
        logger.info(f"Created event {slug}")
        return Event(**row)
