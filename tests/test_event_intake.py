"""Tests for event intake: date/time parsing and creation validation."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from domains.events import (
    EventValidationError,
    IdentityUnavailableError,
    PersistenceFault,
    build_event,
    create_event,
    parse_date,
    parse_start_time,
    parse_time,
)

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


# ============================================================
# Time parsing
# ============================================================

@pytest.mark.parametrize("text,expected", [
    ("2:30 PM", (14, 30)),
    ("12:15 AM", (0, 15)),
    ("12:00 PM", (12, 0)),
    ("12:59 pm", (12, 59)),
    ("9:05 am", (9, 5)),
    ("2 PM", (14, 0)),
    ("2:30PM", (14, 30)),
    ("14:30", (14, 30)),
    ("00:00", (0, 0)),
    ("23:59", (23, 59)),
    ("  7:45  ", (7, 45)),
])
def test_parse_time_valid(text, expected):
    assert parse_time(text) == expected


@pytest.mark.parametrize("text", [
    "24:00", "12:60", "1:75 PM", "13:00 PM", "noon", "", "2:30 XM", "-1:00", "10:30:15",
])
def test_parse_time_invalid(text):
    with pytest.raises(EventValidationError):
        parse_time(text)


# ============================================================
# Date parsing
# ============================================================

@pytest.mark.parametrize("text,expected", [
    ("10/18/2026", (2026, 10, 18)),
    ("1/5/2027", (2027, 1, 5)),
    ("02/29/2028", (2028, 2, 29)),
])
def test_parse_date_valid(text, expected):
    assert parse_date(text) == expected


@pytest.mark.parametrize("text", [
    "2026-10-18", "13/01/2026", "02/30/2026", "10/18", "aa/bb/cccc", "10/18/2026/1", "",
])
def test_parse_date_invalid(text):
    with pytest.raises(EventValidationError):
        parse_date(text)


def test_parse_start_time_converts_local_to_utc():
    london = ZoneInfo("Europe/London")
    # BST (UTC+1) in October before the clocks change
    start = parse_start_time("10/18/2026", "2:30 PM", london)

    assert start == datetime(2026, 10, 18, 13, 30, tzinfo=timezone.utc)
    assert start.tzinfo == timezone.utc


def test_parse_start_time_defaults_to_configured_zone(monkeypatch):
    from domains.events import config as events_config
    monkeypatch.setattr(events_config, "EVENTS_TZ", ZoneInfo("America/New_York"))

    start = parse_start_time("01/10/2027", "9:00 AM")
    assert start == datetime(2027, 1, 10, 14, 0, tzinfo=timezone.utc)


# ============================================================
# Event building
# ============================================================

def _build(**overrides):
    fields = dict(
        name="Mock interview",
        date="10/18/2026",
        time="2:30 PM",
        notify=True,
        user_email="user@example.com",
        notes="Bring resume",
        tz=timezone.utc,
        now=NOW,
    )
    fields.update(overrides)
    return build_event(**fields)


def test_build_event_is_canonical():
    event = _build()

    assert event.id == int(NOW.timestamp() * 1000)
    assert event.start_time == datetime(2026, 10, 18, 14, 30, tzinfo=timezone.utc)
    assert event.notify is True
    assert event.notes == "Bring resume"
    assert event.user_email == "user@example.com"
    assert event.notified_one_day is False
    assert event.notified_one_hour is False


def test_build_event_notes_default_to_empty():
    assert _build(notes=None).notes == ""


@pytest.mark.parametrize("missing", ["name", "date", "time"])
def test_build_event_requires_fields(missing):
    with pytest.raises(EventValidationError, match="Missing required fields"):
        _build(**{missing: ""})


def test_build_event_requires_notify_flag():
    with pytest.raises(EventValidationError, match="Missing required fields"):
        _build(notify=None)


def test_build_event_accepts_notify_false():
    assert _build(notify=False).notify is False


def test_name_length_bound():
    assert _build(name="x" * 300).name == "x" * 300
    with pytest.raises(EventValidationError, match="300 characters"):
        _build(name="x" * 301)


def test_notes_length_bound():
    assert len(_build(notes="n" * 2000).notes) == 2000
    with pytest.raises(EventValidationError, match="2000 characters"):
        _build(notes="n" * 2001)


def test_invalid_time_rejected_before_event_exists():
    with pytest.raises(EventValidationError, match="Invalid time"):
        _build(time="25:00")


# ============================================================
# Create
# ============================================================

def test_create_event_stores_event(event_store):
    event = create_event(
        event_store,
        name="Career fair",
        date="10/20/2026",
        time="10:00",
        notify=True,
        resolve_email=lambda: "user@example.com",
        tz=timezone.utc,
        now=NOW,
    )

    assert event_store.load_all() == [event]


def test_create_event_requires_identity(event_store):
    with pytest.raises(IdentityUnavailableError):
        create_event(
            event_store,
            name="Career fair",
            date="10/20/2026",
            time="10:00",
            notify=True,
            resolve_email=lambda: None,
        )
    assert event_store.load_all() == []


def test_create_event_invalid_input_stores_nothing(event_store):
    with pytest.raises(EventValidationError):
        create_event(
            event_store,
            name="Career fair",
            date="20/10/2026",
            time="10:00",
            notify=True,
            resolve_email=lambda: "user@example.com",
        )
    assert event_store.load_all() == []


def test_create_event_persistence_fault(tmp_path):
    from domains.events import EventStore

    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    store = EventStore(blocker / "events.json")

    with pytest.raises(PersistenceFault):
        create_event(
            store,
            name="Career fair",
            date="10/20/2026",
            time="10:00",
            notify=True,
            resolve_email=lambda: "user@example.com",
        )
