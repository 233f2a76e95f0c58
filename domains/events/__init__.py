"""Event reminders: one-day and one-hour email reminders for calendar events.

Uses an APScheduler interval job with JSON file persistence.
"""

from .errors import EventValidationError, IdentityUnavailableError, PersistenceFault
from .models import Event, NotificationState, Threshold
from .windows import thresholds_due, due_thresholds, minutes_until
from .store import EventStore, get_event_store, reset_event_store
from .intake import parse_start_time, parse_date, parse_time, build_event, create_event
from .identity import current_user_email
from .mailer import MailTransport, SmtpTransport
from .dispatcher import ReminderDispatcher, render_reminder, format_start_time
from .scheduler import ReminderScheduler, TickResult, tolerance_for_interval

__all__ = [
    "EventValidationError",
    "IdentityUnavailableError",
    "PersistenceFault",
    "Event",
    "NotificationState",
    "Threshold",
    "thresholds_due",
    "due_thresholds",
    "minutes_until",
    "EventStore",
    "get_event_store",
    "reset_event_store",
    "parse_start_time",
    "parse_date",
    "parse_time",
    "build_event",
    "create_event",
    "current_user_email",
    "MailTransport",
    "SmtpTransport",
    "ReminderDispatcher",
    "render_reminder",
    "format_start_time",
    "ReminderScheduler",
    "TickResult",
    "tolerance_for_interval",
]
