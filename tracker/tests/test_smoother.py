"""Tests for the rolling speed window."""

from __future__ import annotations

import pytest

from tracker.core.smoother import WINDOW_SIZE, SpeedSmoother


def test_empty_window_mean_is_zero():
    s = SpeedSmoother()
    assert len(s) == 0
    assert s.mean() == 0.0
    assert s.values() == ()


def test_mean_of_partial_window():
    s = SpeedSmoother()
    assert s.push(10.0) == pytest.approx(10.0)
    assert s.push(20.0) == pytest.approx(15.0)
    assert s.values() == (10.0, 20.0)


def test_oldest_evicted_once_full():
    s = SpeedSmoother()
    for v in [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]:
        s.push(v)
    assert len(s) == WINDOW_SIZE
    assert s.values() == (3.0, 4.0, 5.0, 6.0, 7.0)
    assert s.mean() == pytest.approx(5.0)


def test_window_never_exceeds_capacity():
    s = SpeedSmoother()
    for i in range(23):
        smoothed = s.push(float(i))
        held = s.values()
        assert len(held) <= WINDOW_SIZE
        assert smoothed == pytest.approx(sum(held) / len(held))


def test_reset_empties():
    s = SpeedSmoother()
    for v in [4.0, 8.0, 12.0, 16.0, 20.0, 24.0]:
        s.push(v)
    s.reset()
    assert len(s) == 0
    assert s.push(3.0) == pytest.approx(3.0)
    assert s.values() == (3.0,)
