"""Domain modules for the Event Reminder service."""
