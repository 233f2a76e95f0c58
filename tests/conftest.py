"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.events import Event, EventStore, ReminderDispatcher

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def event_store(tmp_path):
    """Fresh JSON-backed store in a temp directory."""
    return EventStore(tmp_path / "events.json")


@pytest.fixture
def mock_transport():
    """Mail transport that accepts every message."""
    transport = Mock()
    transport.deliver = Mock(return_value=True)
    return transport


@pytest.fixture
def dispatcher(mock_transport):
    """Dispatcher wired to the mock transport."""
    return ReminderDispatcher(transport=mock_transport, timeout=5, tz=timezone.utc)


@pytest.fixture
def make_event():
    """Factory for events starting a number of minutes after NOW."""
    counter = iter(range(1, 10_000))

    def _make(minutes_from_now: float = 24 * 60, **overrides) -> Event:
        fields = dict(
            id=next(counter),
            name="Mock interview",
            start_time=NOW + timedelta(minutes=minutes_from_now),
            notify=True,
            user_email="user@example.com",
            notes="",
        )
        fields.update(overrides)
        return Event(**fields)

    return _make
