"""JSON file persistence for events.

The whole event list lives in a single JSON file. Every operation is a
read-modify-write of the full list under one process-wide lock, so HTTP
requests and the reminder scan never interleave their writes.

Persistence faults never propagate: reads degrade to an empty list and
failed writes are logged and reported as False.
"""

import json
import os
import tempfile
import threading
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from config import EVENTS_FILE
from logger import logger
from .models import Event, NotificationState


class EventStore:
    """Durable event records backed by a JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.RLock()

    def load_all(self) -> list[Event]:
        """Load every stored event.

        Records that cannot be parsed are skipped here but stay on disk.

        Returns:
            List of events, empty if nothing is stored or the file is unreadable
        """
        with self._lock:
            records = self._read_records()

        events = []
        for record in records:
            event = self._parse(record)
            if event is not None:
                events.append(event)
        return events

    def save_all(self, events: Iterable[Event]) -> bool:
        """Atomically replace the stored event set.

        Returns:
            True if written successfully
        """
        records = [event.to_record() for event in events]
        with self._lock:
            return self._write_records(records)

    def append(self, event: Event) -> Optional[Event]:
        """Add a new event.

        If the id is already taken, the event is stored under the next free id.

        Returns:
            The stored event, or None if the write failed
        """
        with self._lock:
            records = self._read_records()
            taken = {_record_id(r) for r in records} - {None}
            if event.id in taken:
                event = replace(event, id=max(taken) + 1)

            records.append(event.to_record())
            if not self._write_records(records):
                return None

        logger.info(f"Stored event {event.id}: '{event.name[:30]}' at {event.start_time.isoformat()}")
        return event

    def remove_by_id(self, event_id: int) -> bool:
        """Delete an event.

        Returns:
            True iff an event with that id existed and was removed
        """
        with self._lock:
            records = self._read_records()
            remaining = [r for r in records if _record_id(r) != event_id]
            if len(remaining) == len(records):
                return False
            if not self._write_records(remaining):
                return False

        logger.info(f"Deleted event {event_id}")
        return True

    def get_by_id(self, event_id: int) -> Optional[Event]:
        for event in self.load_all():
            if event.id == event_id:
                return event
        return None

    def record_notifications(self, updates: dict[int, NotificationState]) -> bool:
        """Persist notification flags for the given events.

        Re-reads the store under the lock and only touches events that still
        exist, so an event deleted since it was scanned stays deleted. Flags
        are merged, never cleared. Every other record is written back as read.

        Args:
            updates: Event id -> state reached during the scan

        Returns:
            True if the flags are durable (or nothing needed writing)
        """
        if not updates:
            return True

        with self._lock:
            records = self._read_records()
            changed = False
            for i, record in enumerate(records):
                state = updates.get(_record_id(record))
                if state is None:
                    continue
                event = self._parse(record)
                if event is None:
                    continue
                updated = event.with_state(state)
                if updated != event:
                    records[i] = {**record, **updated.to_record()}
                    changed = True

            if not changed:
                return True
            return self._write_records(records)

    @staticmethod
    def _parse(record: dict) -> Optional[Event]:
        try:
            return Event.from_record(record)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping malformed event record {record!r:.80}: {e}")
            return None

    def _read_records(self) -> list[dict]:
        if not self.path.exists():
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading events from {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"Events file {self.path} does not contain a list, ignoring it")
            return []
        return data

    def _write_records(self, records: list[dict]) -> bool:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"Error writing events to {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            return False


def _record_id(record) -> Optional[int]:
    """Id of a raw record, or None if it has no usable one."""
    if not isinstance(record, dict):
        return None
    try:
        return int(record.get("id"))
    except (TypeError, ValueError):
        return None


# Process-wide store instance
_event_store: Optional[EventStore] = None


def get_event_store() -> EventStore:
    """Get the global event store.

    Creates the instance on first call (lazy initialization).
    """
    global _event_store

    if _event_store is None:
        _event_store = EventStore(EVENTS_FILE)
        logger.info(f"Event store initialized: {EVENTS_FILE}")

    return _event_store


def reset_event_store(path: Path | str | None = None) -> EventStore:
    """Replace the global event store (for testing)."""
    global _event_store

    _event_store = EventStore(path or EVENTS_FILE)
    return _event_store
