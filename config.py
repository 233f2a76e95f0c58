"""Global configuration for the Event Reminder service."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# SMTP mail transport
EMAIL_HOST = os.getenv("EMAIL_HOST")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_USER = os.getenv("EMAIL_USER")
EMAIL_PASS = os.getenv("EMAIL_PASS")
EMAIL_FROM = os.getenv("EMAIL_FROM") or EMAIL_USER
# Implicit TLS (SMTPS, usually port 465); otherwise STARTTLS is used when offered
EMAIL_USE_SSL = os.getenv("EMAIL_USE_SSL", "false").lower() in ("1", "true", "yes")

# Data files (events + server-side user profile)
DATA_DIR = Path(os.getenv("EVENTS_DATA_DIR", "data"))
EVENTS_FILE = Path(os.getenv("EVENTS_FILE", str(DATA_DIR / "events.json")))
USERS_FILE = Path(os.getenv("USERS_FILE", str(DATA_DIR / "users.json")))

# Wall-clock zone for submitted times, month filters and rendered emails
EVENTS_TIMEZONE = os.getenv("EVENTS_TIMEZONE", "UTC")

# HTTP API
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8100"))

# Logging
LOG_DIR = Path(os.getenv("LOG_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "event-reminders" / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
