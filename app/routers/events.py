# =============================================================================
# app/routers/events.py - Prediction Event Endpoints
# =============================================================================
# Mounted at /api/events. Reading is public; creating requires the admin key.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel

from app.dependencies import DatabaseDep, require_admin_key
from core.models.calendar import Event, EventCreate, EventDetail
from core.services.event_service import EventService

router = APIRouter()


class EventList(BaseModel):
    events: list[Event]
    count: int


@router.get("", response_model=EventList)
async def list_events(db: DatabaseDep, status: str | None = None):
    """Events by date with their participant counts."""
    events = EventService(db).list_events(status)
    return EventList(events=events, count=len(events))


@router.get("/{slug}", response_model=EventDetail)
async def get_event(
    db: DatabaseDep,
    slug: Annotated[str, Path(description="Event slug")],
):
    """One event and its predictions."""
    return EventService(db).get_event(slug)


@router.post(
    "",
    response_model=Event,
    status_code=201,
    dependencies=[Depends(require_admin_key)],
)
async def create_event(db: DatabaseDep, event: EventCreate):
    """
    Create an event. The slug is generated from the name.

    Requires the x-admin-key header.
    """
    return EventService(db).create_event(event)
