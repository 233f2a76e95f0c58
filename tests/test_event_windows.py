"""Tests for threshold window evaluation."""

from datetime import datetime, timedelta, timezone

import pytest

from domains.events import NotificationState, Threshold, due_thresholds, thresholds_due

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

FRESH = NotificationState()


def _due(minutes: float, state: NotificationState = FRESH, **kwargs) -> set:
    return thresholds_due(NOW, NOW + timedelta(minutes=minutes), state, **kwargs)


@pytest.mark.parametrize("minutes", [1439, 1439.5, 1440, 1440.99, 1441])
def test_one_day_due_inside_window(minutes):
    assert _due(minutes) == {Threshold.ONE_DAY}


@pytest.mark.parametrize("minutes", [59, 60, 60.5, 61])
def test_one_hour_due_inside_window(minutes):
    assert _due(minutes) == {Threshold.ONE_HOUR}


@pytest.mark.parametrize("minutes", [1438.9, 1441.1, 58.9, 61.1, 0, -60, -1440, 720])
def test_nothing_due_outside_windows(minutes):
    assert _due(minutes) == set()


def test_notified_threshold_is_never_due_again():
    assert _due(1440, NotificationState(one_day=True)) == set()
    assert _due(60, NotificationState(one_hour=True)) == set()
    assert _due(60, NotificationState(one_day=True)) == {Threshold.ONE_HOUR}


def test_wider_tolerance_widens_both_windows():
    assert _due(1443, tolerance_minutes=3) == {Threshold.ONE_DAY}
    assert _due(57, tolerance_minutes=3) == {Threshold.ONE_HOUR}
    assert _due(1443) == set()


def test_naive_datetimes_rejected():
    naive = datetime(2026, 10, 17, 12, 0)
    with pytest.raises(ValueError):
        thresholds_due(naive, naive + timedelta(hours=1), FRESH)


@pytest.mark.parametrize("minutes", [60, 1440, 1000, -5])
def test_notify_off_is_never_due(make_event, minutes):
    event = make_event(minutes, notify=False)
    assert due_thresholds(event, NOW) == set()


def test_due_thresholds_uses_event_flags(make_event):
    event = make_event(60, notified_one_hour=True)
    assert due_thresholds(event, NOW) == set()

    event = make_event(60)
    assert due_thresholds(event, NOW) == {Threshold.ONE_HOUR}
