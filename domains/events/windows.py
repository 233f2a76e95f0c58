"""Decide which reminder thresholds an event has just crossed.

Pure functions only: no I/O, no clock reads. The caller passes `now`.
"""

from datetime import datetime

from . import config
from .models import Event, NotificationState, Threshold


def minutes_until(now: datetime, start_time: datetime) -> float:
    """Signed minutes from `now` until `start_time` (negative once started)."""
    if now.tzinfo is None or start_time.tzinfo is None:
        raise ValueError("Threshold math requires timezone-aware datetimes")
    return (start_time - now).total_seconds() / 60


def thresholds_due(
    now: datetime,
    start_time: datetime,
    state: NotificationState,
    tolerance_minutes: float = config.WINDOW_TOLERANCE_MINUTES,
) -> set[Threshold]:
    """Return the thresholds whose window contains `now` and are not yet notified.

    A threshold with lead time L is inside its window when
    L - tolerance <= minutes_until(now, start_time) <= L + tolerance.
    With the default tolerance that is [1439, 1441] for one day and [59, 61]
    for one hour.

    Args:
        now: Evaluation instant
        start_time: Event start instant
        state: Thresholds already notified for the event
        tolerance_minutes: Half-width of each window

    Returns:
        Set of due thresholds (possibly empty)
    """
    diff = minutes_until(now, start_time)
    due = set()
    for threshold in Threshold:
        if state.is_notified(threshold):
            continue
        lead = threshold.lead_minutes
        if lead - tolerance_minutes <= diff <= lead + tolerance_minutes:
            due.add(threshold)
    return due


def due_thresholds(
    event: Event,
    now: datetime,
    tolerance_minutes: float = config.WINDOW_TOLERANCE_MINUTES,
) -> set[Threshold]:
    """Thresholds due for `event` at `now`; always empty when notify is off."""
    if not event.notify:
        return set()
    return thresholds_due(now, event.start_time, event.state, tolerance_minutes)
