"""Event reminder domain configuration."""

import os
from zoneinfo import ZoneInfo

from config import EVENTS_TIMEZONE  # Loads .env before the lookups below

# Scan cadence for the reminder job
SCAN_INTERVAL_SECONDS = int(os.environ.get("REMINDER_SCAN_INTERVAL_SECONDS", 60))

# Max seconds a single mail delivery may take before it counts as failed
DISPATCH_TIMEOUT_SECONDS = float(os.environ.get("DISPATCH_TIMEOUT_SECONDS", 30))

# Reminder lead times (minutes before start)
ONE_DAY_LEAD_MINUTES = 24 * 60
ONE_HOUR_LEAD_MINUTES = 60

# Half-width of the window around each lead time, in minutes
WINDOW_TOLERANCE_MINUTES = 1

# Field bounds for event intake
MAX_NAME_LENGTH = 300
MAX_NOTES_LENGTH = 2000

# Submitted date format (times are matched by intake.TIME_PATTERN)
DATE_FORMAT = "MM/DD/YYYY"

# Signature appended to every reminder email
SIGNATURE = "- Event Reminder Scheduler"

# APScheduler job id for the periodic scan
SCAN_JOB_ID = "event_reminder_scan"

# Zone used for submitted wall-clock times, month filters and rendered emails
EVENTS_TZ = ZoneInfo(EVENTS_TIMEZONE)
