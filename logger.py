"""Logging configuration for the Event Reminder service."""

import logging
import sys
from datetime import datetime

from config import LOG_DIR, LOG_LEVEL


def setup_logging() -> logging.Logger:
    """Set up logging to a dated file, plus the console when attached to a TTY."""
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logger = logging.getLogger("event_reminders")
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    log_file = LOG_DIR / f"{datetime.now().strftime('%Y-%m-%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    if sys.stdout is not None and sys.stdout.isatty():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

    # APScheduler logs every job run at INFO; the scan runs once a minute
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    return logger


# Global logger instance
logger = setup_logging()
