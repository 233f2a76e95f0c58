"""Event API Routes.

Thin CRUD over the event store:
- POST   /api/events              create an event for the current user
- GET    /api/events?month=YYYY-MM  list events starting in a month
- DELETE /api/events/{id}         delete an event
"""

import re
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from domains.events import config as events_config
from domains.events import (
    EventStore,
    EventValidationError,
    IdentityUnavailableError,
    PersistenceFault,
    create_event,
    current_user_email,
    get_event_store,
)
from logger import logger

router = APIRouter(prefix="/api", tags=["Events"])

MONTH_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})$')


# ============================================================
# Pydantic Models
# ============================================================

class EventCreate(BaseModel):
    """Create a new event. Missing fields are reported as a 400, not a 422."""
    name: Optional[str] = None
    date: Optional[str] = None  # MM/DD/YYYY
    time: Optional[str] = None  # HH:MM or HH:MM AM/PM
    notify: Optional[bool] = None
    notes: Optional[str] = None


# ============================================================
# Dependencies
# ============================================================

def get_email_resolver() -> Callable[[], Optional[str]]:
    """Resolver for the address stamped on new events."""
    return current_user_email


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of a YYYY-MM month in EVENTS_TZ.

    Raises:
        ValueError: If the month is malformed
    """
    match = MONTH_PATTERN.match(month.strip())
    if not match:
        raise ValueError(f"Invalid month: {month}")

    year, month_num = int(match.group(1)), int(match.group(2))
    if month_num < 1 or month_num > 12:
        raise ValueError(f"Invalid month: {month}")

    tz = events_config.EVENTS_TZ
    start = datetime(year, month_num, 1, tzinfo=tz)
    if month_num == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month_num + 1, 1, tzinfo=tz)
    return start, end


# ============================================================
# Routes
# ============================================================

@router.post("/events", status_code=201)
def create_event_route(
    body: EventCreate,
    store: EventStore = Depends(get_event_store),
    resolve_email: Callable[[], Optional[str]] = Depends(get_email_resolver),
):
    """Create an event for the current user."""
    try:
        event = create_event(
            store,
            name=body.name,
            date=body.date,
            time=body.time,
            notify=body.notify,
            notes=body.notes,
            resolve_email=resolve_email,
        )
    except EventValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IdentityUnavailableError:
        raise HTTPException(
            status_code=500,
            detail="Could not determine user email from server-side users file.",
        )
    except PersistenceFault as e:
        raise HTTPException(status_code=500, detail=str(e))

    return event.to_record()


@router.get("/events")
def list_events(
    month: Optional[str] = Query(default=None, description="Month as YYYY-MM"),
    store: EventStore = Depends(get_event_store),
):
    """List events starting in the given month, sorted by start time."""
    if not month:
        raise HTTPException(status_code=400, detail="month query parameter required.")

    try:
        start, end = month_bounds(month)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format.")

    events = [e for e in store.load_all() if start <= e.start_time < end]
    events.sort(key=lambda e: e.start_time)
    return [e.to_record() for e in events]


@router.delete("/events/{event_id}")
def delete_event(event_id: str, store: EventStore = Depends(get_event_store)):
    """Delete an event by id."""
    try:
        parsed_id = int(event_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid event id.")

    if not store.remove_by_id(parsed_id):
        logger.info(f"Delete requested for unknown event {parsed_id}")
        raise HTTPException(status_code=404, detail="Event not found.")

    return {"success": True}
