"""Periodic reminder scan driven by APScheduler.

Each tick loads every event, sends reminders for thresholds whose window
contains the current time, and persists the new flags in one write.

A tick never stops because of one event: per-event errors are logged and
the scan moves on. Failed sends leave the flag unset, so the next tick
retries while the event is still inside the window.
"""

import asyncio
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from logger import logger
from . import config
from .dispatcher import ReminderDispatcher
from .models import Event, NotificationState, Threshold
from .store import EventStore
from .windows import due_thresholds


@dataclass
class TickResult:
    """Outcome of one scan."""
    scanned: int = 0
    sent: list[tuple[int, Threshold]] = field(default_factory=list)
    failed: list[tuple[int, Threshold]] = field(default_factory=list)
    errors: list[int] = field(default_factory=list)
    persisted: bool = False


def tolerance_for_interval(interval_seconds: float) -> int:
    """Window half-width (minutes) that guarantees one tick lands inside it."""
    return max(config.WINDOW_TOLERANCE_MINUTES, math.ceil(interval_seconds / 60))


class ReminderScheduler:
    """Owns the recurring reminder scan job.

    Usage:
        reminders = ReminderScheduler(store, dispatcher)
        reminders.start()   # inside a running event loop
        ...
        reminders.stop()
    """

    def __init__(
        self,
        store: EventStore,
        dispatcher: ReminderDispatcher,
        scheduler: Optional[AsyncIOScheduler] = None,
        interval_seconds: int = config.SCAN_INTERVAL_SECONDS,
    ):
        """Initialize the coordinator.

        Args:
            store: Event store to scan
            dispatcher: Sends reminder emails
            scheduler: APScheduler instance (a private one is created if omitted)
            interval_seconds: Scan cadence
        """
        self.store = store
        self.dispatcher = dispatcher
        self.interval_seconds = interval_seconds
        self.tolerance_minutes = tolerance_for_interval(interval_seconds)

        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)

        # Serializes ticks so two scans never mutate flags concurrently
        self._tick_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self.scheduler.running and self.scheduler.get_job(config.SCAN_JOB_ID) is not None

    def start(self) -> None:
        """Register the scan job and start the scheduler if needed."""
        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=config.SCAN_JOB_ID,
            name="Scan events for due reminders",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(
            f"Started event reminder scan (every {self.interval_seconds}s, "
            f"window ±{self.tolerance_minutes}m)"
        )

    def stop(self) -> None:
        """Remove the scan job, shutting down the scheduler if we created it."""
        if self.scheduler.get_job(config.SCAN_JOB_ID) is not None:
            self.scheduler.remove_job(config.SCAN_JOB_ID)
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Stopped event reminder scan")

    async def tick(self, now: Optional[datetime] = None) -> TickResult:
        """Run one scan over all events.

        Args:
            now: Evaluation instant (defaults to the current UTC time)

        Returns:
            TickResult describing what was sent and persisted
        """
        async with self._tick_lock:
            now = now or datetime.now(timezone.utc)
            result = TickResult()
            updates: dict[int, NotificationState] = {}

            # Store calls take a thread lock shared with the HTTP handlers
            events = await asyncio.to_thread(self.store.load_all)
            result.scanned = len(events)

            for event in events:
                state = await self._notify_event(event, now, result)
                if state != event.state:
                    updates[event.id] = state

            if updates:
                result.persisted = await asyncio.to_thread(self.store.record_notifications, updates)
                if not result.persisted:
                    logger.error(f"Failed to persist reminder flags for {len(updates)} event(s)")

            if result.sent or result.failed:
                logger.info(
                    f"Reminder scan: {result.scanned} events, {len(result.sent)} sent, "
                    f"{len(result.failed)} failed"
                )
            return result

    async def _notify_event(self, event: Event, now: datetime, result: TickResult) -> NotificationState:
        """Send every due reminder for one event and return the state reached.

        Thresholds are attempted independently, so a send that succeeded is
        kept even if a later one for the same event errors.
        """
        state = event.state
        try:
            due = due_thresholds(event, now, self.tolerance_minutes)
        except Exception as e:
            logger.error(f"Reminder scan failed for event {event.id}: {e}")
            result.errors.append(event.id)
            return state

        for threshold in sorted(due, key=lambda t: -t.lead_minutes):
            try:
                delivered = await self.dispatcher.send(event, threshold)
            except Exception as e:
                logger.error(f"Reminder scan failed for event {event.id} ({threshold.label}): {e}")
                if event.id not in result.errors:
                    result.errors.append(event.id)
                continue

            if delivered:
                state = state.advance(threshold)
                result.sent.append((event.id, threshold))
            else:
                result.failed.append((event.id, threshold))
        return state
