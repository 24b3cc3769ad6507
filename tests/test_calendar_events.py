# =============================================================================
# tests/test_calendar_events.py - Release Calendar & Event Tests
# =============================================================================

from datetime import date

import pytest

from app.exceptions import EventExistsError, EventNotFoundError, InvalidQueryError
from core.models.calendar import EventCreate
from core.services.calendar_service import CALENDAR_TABLE, CalendarService, month_bounds
from core.services.event_service import EVENTS_TABLE, PREDICTIONS_TABLE, EventService
from lib.supabase_client import SupabaseClientError

ADMIN_HEADERS = {"x-admin-key": "test-admin-key"}


def calendar_row(day: str, indicator: str) -> dict:
    return {"id": 1, "date": day, "day_week": "Jueves", "indicator": indicator, "period": "Mayo", "source": "INDEC"}


# =============================================================================
# Calendar
# =============================================================================

class TestMonthBounds:

    def test_month_of_current_year(self):
        assert month_bounds(2, None, date(2024, 6, 1)) == ("2024-02-01", "2024-02-29")

    def test_whole_year(self):
        assert month_bounds(None, 2023, date(2024, 6, 1)) == ("2023-01-01", "2023-12-31")


class TestCalendarService:

    def test_entries_carry_slugs(self, db):
        db.queue(CALENDAR_TABLE, [calendar_row("2024-06-13", "Índice de Precios al Consumidor")], count=1)

        result = CalendarService(db).list_entries()

        assert result.data[0].slug == "indice-de-precios-al-consumidor"
        assert result.pagination.total_items == 1

    def test_start_date_overrides_month(self, db):
        db.queue(CALENDAR_TABLE, [], count=0)

        CalendarService(db).list_entries(month=3, year=2024, start_date="2024-05", end_date="2024-05-31")

        query = db.queries_for(CALENDAR_TABLE)[0]
        assert query.called("gte") == [("date", "2024-05-01")]
        assert query.called("lte") == [("date", "2024-05-31")]

    def test_month_window(self, db):
        db.queue(CALENDAR_TABLE, [], count=0)

        CalendarService(db).list_entries(month=3, today=date(2024, 6, 1))

        query = db.queries_for(CALENDAR_TABLE)[0]
        assert query.called("gte") == [("date", "2024-03-01")]
        assert query.called("lte") == [("date", "2024-03-31")]

    def test_limit_above_maximum(self, db):
        with pytest.raises(InvalidQueryError):
            CalendarService(db).list_entries(limit=501)

    def test_get_by_slug(self, db):
        db.queue(CALENDAR_TABLE, [
            calendar_row("2024-06-13", "Índice de Precios al Consumidor"),
            calendar_row("2024-06-20", "EMAE"),
            calendar_row("2024-07-12", "Índice de precios al consumidor"),
        ])

        entries = CalendarService(db).get_by_slug("indice-de-precios-al-consumidor")

        assert [entry.date for entry in entries] == ["2024-06-13", "2024-07-12"]

    def test_slug_route(self, client, db):
        db.queue(CALENDAR_TABLE, [calendar_row("2024-06-20", "EMAE")])
        body = client.get("/api/calendar/emae").json()
        assert body["metadata"] == {"count": 1, "slug": "emae"}


# =============================================================================
# Events
# =============================================================================

class TestEventService:

    def test_list_with_participant_counts(self, db):
        db.queue(EVENTS_TABLE, [
            {"id": 1, "name": "IPC Junio", "slug": "ipc-junio", PREDICTIONS_TABLE: [{"count": 12}]},
            {"id": 2, "name": "EMAE Mayo", "slug": "emae-mayo", PREDICTIONS_TABLE: []},
        ])

        events = EventService(db).list_events()

        assert [event.participant_count for event in events] == [12, 0]
        assert db.queries_for(EVENTS_TABLE)[0].called("select") == [(f"*, {PREDICTIONS_TABLE}(count)",)]
        assert db.queries_for(PREDICTIONS_TABLE) == []

    def test_get_event_not_found(self, db):
        db.queue(EVENTS_TABLE, [])
        with pytest.raises(EventNotFoundError):
            EventService(db).get_event("missing")

    def test_get_event_with_predictions(self, client, db):
        db.queue(EVENTS_TABLE, [{"id": 7, "name": "IPC Junio", "slug": "ipc-junio"}])
        db.queue(PREDICTIONS_TABLE, [{"id": 1, "event_id": 7, "predicted_value": 4.2}])

        body = client.get("/api/events/ipc-junio").json()

        assert body["event"]["slug"] == "ipc-junio"
        assert body["predictions"][0]["predicted_value"] == 4.2

    def test_create_derives_slug(self, db):
        db.queue(EVENTS_TABLE, [])

        event = EventService(db).create_event(EventCreate(name="Inflación de Junio 2024"))

        assert event.slug == "inflacion-de-junio-2024"
        assert event.status == "open"
        inserted = db.queries_for(EVENTS_TABLE)[0].called("insert")[0][0]
        assert inserted["slug"] == "inflacion-de-junio-2024"

    @pytest.mark.parametrize("name", ["\u00bf\u00a1!?", "---", "  "])
    def test_create_rejects_name_without_slug(self, db, name):
        with pytest.raises(InvalidQueryError):
            EventService(db).create_event(EventCreate(name=name))
        assert db.queries_for(EVENTS_TABLE) == []

    def test_create_duplicate_slug(self, db):
        db.queue(EVENTS_TABLE, error=Exception("duplicate key value violates unique constraint (23505)"))

        with pytest.raises(EventExistsError):
            EventService(db).create_event(EventCreate(name="IPC Junio"))

    def test_create_other_failure_propagates(self, db):
        db.queue(EVENTS_TABLE, error=Exception("connection reset"))

        with pytest.raises(SupabaseClientError):
            EventService(db).create_event(EventCreate(name="IPC Junio"))


class TestEventRoutes:

    def test_create_requires_admin_key(self, client):
        response = client.post("/api/events", json={"name": "IPC Junio"})
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_create_with_wrong_key(self, client):
        response = client.post("/api/events", json={"name": "IPC Junio"}, headers={"x-admin-key": "nope"})
        assert response.status_code == 401

    def test_create_with_admin_key(self, client, db):
        db.queue(EVENTS_TABLE, [{"id": 3, "name": "IPC Junio", "slug": "ipc-junio", "status": "open"}])

        response = client.post("/api/events", json={"name": "IPC Junio"}, headers=ADMIN_HEADERS)

        assert response.status_code == 201
        assert response.json()["slug"] == "ipc-junio"

    def test_create_without_slug_is_400(self, client):
        response = client.post("/api/events", json={"name": "\u00bf\u00a1!?"}, headers=ADMIN_HEADERS)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_QUERY"

    def test_create_duplicate_is_409(self, client, db):
        db.queue(EVENTS_TABLE, error=Exception("duplicate key value (23505)"))

        response = client.post("/api/events", json={"name": "IPC Junio"}, headers=ADMIN_HEADERS)

        assert response.status_code == 409
        assert response.json()["code"] == "EVENT_EXISTS"

    def test_unknown_event_is_404(self, client, db):
        db.queue(EVENTS_TABLE, [])
        response = client.get("/api/events/nothing-here")
        assert response.status_code == 404
        assert response.json()["code"] == "EVENT_NOT_FOUND"

    def test_list_route(self, client, db):
        db.queue(EVENTS_TABLE, [])
        assert client.get("/api/events").json() == {"events": [], "count": 0}
