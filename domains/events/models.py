"""Event records and notification state."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from dateutil.parser import isoparse

from . import config


class Threshold(Enum):
    """Fixed lead times at which a reminder fires."""
    ONE_DAY = "one_day"
    ONE_HOUR = "one_hour"

    @property
    def lead_minutes(self) -> int:
        return _LEAD_MINUTES[self]

    @property
    def label(self) -> str:
        """Human-readable label used in the email subject."""
        return _LABELS[self]


_LEAD_MINUTES = {
    Threshold.ONE_DAY: config.ONE_DAY_LEAD_MINUTES,
    Threshold.ONE_HOUR: config.ONE_HOUR_LEAD_MINUTES,
}

_LABELS = {
    Threshold.ONE_DAY: "1 day before",
    Threshold.ONE_HOUR: "1 hour before",
}


@dataclass(frozen=True)
class NotificationState:
    """Which thresholds have already been notified for an event.

    Transitions only ever set flags:
    - (F, F) -> (T, F) -> (T, T)
    - (F, F) -> (F, T) -> (T, T)
    """
    one_day: bool = False
    one_hour: bool = False

    def is_notified(self, threshold: Threshold) -> bool:
        if threshold is Threshold.ONE_DAY:
            return self.one_day
        return self.one_hour

    def advance(self, threshold: Threshold) -> "NotificationState":
        """Return the state with `threshold` marked as notified."""
        if threshold is Threshold.ONE_DAY:
            return replace(self, one_day=True)
        return replace(self, one_hour=True)

    def merge(self, other: "NotificationState") -> "NotificationState":
        return NotificationState(
            one_day=self.one_day or other.one_day,
            one_hour=self.one_hour or other.one_hour,
        )

    @property
    def is_complete(self) -> bool:
        return self.one_day and self.one_hour


@dataclass
class Event:
    """A user-created calendar event that can carry reminders."""
    id: int
    name: str
    start_time: datetime  # Timezone-aware
    notify: bool
    user_email: str
    notes: str = ""
    notified_one_day: bool = False
    notified_one_hour: bool = False

    @property
    def state(self) -> NotificationState:
        return NotificationState(
            one_day=self.notified_one_day,
            one_hour=self.notified_one_hour,
        )

    def with_state(self, state: NotificationState) -> "Event":
        """Copy of this event carrying `state`, never clearing a flag."""
        merged = self.state.merge(state)
        return replace(
            self,
            notified_one_day=merged.one_day,
            notified_one_hour=merged.one_hour,
        )

    def to_record(self) -> dict:
        """Serialize to the on-disk JSON record."""
        return {
            "id": self.id,
            "name": self.name,
            "startTime": self.start_time.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            "notify": self.notify,
            "notes": self.notes,
            "userEmail": self.user_email,
            "notifiedOneDay": self.notified_one_day,
            "notifiedOneHour": self.notified_one_hour,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Event":
        """Build an event from a stored JSON record.

        Raises:
            KeyError, ValueError, TypeError: If the record is malformed
        """
        start_time = _parse_instant(record["startTime"])
        return cls(
            id=int(record["id"]),
            name=str(record["name"]),
            start_time=start_time,
            notify=bool(record.get("notify", False)),
            user_email=str(record.get("userEmail") or ""),
            notes=str(record.get("notes") or ""),
            notified_one_day=bool(record.get("notifiedOneDay", False)),
            notified_one_hour=bool(record.get("notifiedOneHour", False)),
        )


def _parse_instant(value: Optional[str]) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"startTime must be a string, got {type(value).__name__}")
    parsed = isoparse(value)
    # Ensure timezone aware
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
