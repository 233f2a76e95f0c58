"""Validate event creation requests and turn them into canonical events.

Accepted formats:
- date: MM/DD/YYYY, e.g. "10/18/2026"
- time: 24-hour "14:30" or 12-hour "2:30 PM" (minutes optional, "2 PM")

Examples:
- "2:30 PM"  -> 14:30
- "12:15 AM" -> 00:15
- "12:00 PM" -> 12:00
"""

import re
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Optional

from logger import logger
from . import config
from .errors import EventValidationError, IdentityUnavailableError, PersistenceFault
from .identity import current_user_email
from .models import Event
from .store import EventStore

TIME_PATTERN = re.compile(r'^(\d{1,2})(?::(\d{1,2}))?\s*(AM|PM)?$')


def parse_date(date_str: str) -> tuple[int, int, int]:
    """Parse a MM/DD/YYYY date.

    Returns:
        Tuple of (year, month, day)

    Raises:
        EventValidationError: If the text is not a real calendar date
    """
    parts = [p.strip() for p in date_str.strip().split("/")]
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise EventValidationError(f"Invalid date format, expected {config.DATE_FORMAT}.")

    month, day, year = (int(p) for p in parts)
    try:
        date(year, month, day)
    except ValueError:
        raise EventValidationError(f"Invalid date: {date_str.strip()}.")
    return year, month, day


def parse_time(time_str: str) -> tuple[int, int]:
    """Parse a 24-hour or 12-hour time.

    12 PM stays hour 12, 12 AM becomes hour 0, other PM hours add 12.

    Returns:
        Tuple of (hour, minute)

    Raises:
        EventValidationError: If the text is unparseable or out of range
    """
    match = TIME_PATTERN.match(time_str.strip().upper())
    if not match:
        raise EventValidationError("Invalid time format.")

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridian = match.group(3)

    if meridian == "PM" and hour != 12:
        hour += 12
    elif meridian == "AM" and hour == 12:
        hour = 0

    if hour < 0 or hour > 23 or minute < 0 or minute > 59:
        raise EventValidationError("Invalid time format.")
    return hour, minute


def parse_start_time(date_str: str, time_str: str, tz: Optional[tzinfo] = None) -> datetime:
    """Combine a submitted date and time into an absolute instant.

    Args:
        date_str: Date as MM/DD/YYYY
        time_str: Time as HH:MM or HH:MM AM/PM
        tz: Zone the wall-clock time is expressed in (default EVENTS_TZ)

    Returns:
        Timezone-aware datetime in UTC
    """
    year, month, day = parse_date(date_str)
    hour, minute = parse_time(time_str)
    local = datetime(year, month, day, hour, minute, tzinfo=tz or config.EVENTS_TZ)
    return local.astimezone(timezone.utc)


def build_event(
    name: Optional[str],
    date: Optional[str],
    time: Optional[str],
    notify: Optional[bool],
    user_email: str,
    notes: Optional[str] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> Event:
    """Validate creation fields and assemble a new event with both flags unset.

    Raises:
        EventValidationError: On missing fields, bounds or unparseable date/time
    """
    if not name or not date or not time or notify is None:
        raise EventValidationError("Missing required fields.")

    if len(name) > config.MAX_NAME_LENGTH:
        raise EventValidationError(
            f"Event name must be {config.MAX_NAME_LENGTH} characters or less."
        )

    if notes and len(notes) > config.MAX_NOTES_LENGTH:
        raise EventValidationError(
            f"Additional notes must be {config.MAX_NOTES_LENGTH} characters or less."
        )

    start_time = parse_start_time(date, time, tz)
    now = now or datetime.now(timezone.utc)

    return Event(
        id=int(now.timestamp() * 1000),
        name=name,
        start_time=start_time,
        notify=bool(notify),
        user_email=user_email,
        notes=notes or "",
    )


def create_event(
    store: EventStore,
    *,
    name: Optional[str],
    date: Optional[str],
    time: Optional[str],
    notify: Optional[bool],
    notes: Optional[str] = None,
    resolve_email: Callable[[], Optional[str]] = current_user_email,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> Event:
    """Validate a creation request and store the resulting event.

    Raises:
        IdentityUnavailableError: If no current user email is available
        EventValidationError: If the request is invalid
        PersistenceFault: If the event could not be written
    """
    user_email = resolve_email()
    if not user_email:
        raise IdentityUnavailableError("Could not determine user email.")

    event = build_event(
        name=name,
        date=date,
        time=time,
        notify=notify,
        user_email=user_email,
        notes=notes,
        tz=tz,
        now=now,
    )

    stored = store.append(event)
    if stored is None:
        logger.error(f"Failed to persist new event '{event.name[:30]}'")
        raise PersistenceFault("Failed to save event.")
    return stored
