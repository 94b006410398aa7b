"""Tests for TrackerStats counters."""

from __future__ import annotations

from tracker.core.stats import TrackerStats


def test_initial_stats():
    snap = TrackerStats().snapshot()
    assert snap["fixes"]["received"] == 0
    assert snap["fixes"]["last_accepted_ms"] is None
    assert snap["rides"]["saved"] == 0
    assert snap["store_failures"] == 0


def test_fix_counters_add_up():
    stats = TrackerStats()
    stats.record_fix(1000, accepted=True)
    stats.record_fix(2000, accepted=False)
    stats.record_fix(3000, accepted=True)

    snap = stats.snapshot()
    assert snap["fixes"]["received"] == 3
    assert snap["fixes"]["accepted"] == 2
    assert snap["fixes"]["rejected"] == 1
    assert snap["fixes"]["last_accepted_ms"] == 3000


def test_ride_counters():
    stats = TrackerStats()
    stats.record_ride_started()
    stats.record_ride_started()
    stats.record_ride_saved()
    stats.record_ride_too_short()
    stats.record_ride_discarded()
    stats.record_store_failure()
    stats.record_delivery_error()

    snap = stats.snapshot()
    assert snap["rides"] == {"started": 2, "saved": 1, "too_short": 1, "discarded": 1}
    assert snap["store_failures"] == 1
    assert snap["delivery_errors"] == 1
