"""
Tests for core.time: Clock protocol and time helpers.
"""

import pytest
from datetime import datetime, timezone, timedelta

from core.time.clock import (
    FixedClock,
    SystemClock,
    ensure_aware,
    hours_between,
)


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        clock = SystemClock()
        dt = clock.now_utc()
        assert dt.tzinfo is not None
        assert dt.tzinfo == timezone.utc

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed  # Same every time

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 1, 1))

    def test_advance(self):
        fixed = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(hours=2, minutes=30)
        assert clock.now_utc() == fixed + timedelta(hours=2, minutes=30)

    def test_set(self):
        clock = FixedClock(datetime(2026, 3, 2, tzinfo=timezone.utc))
        later = datetime(2026, 4, 1, tzinfo=timezone.utc)
        clock.set(later)
        assert clock.now_utc() == later

    def test_set_rejects_naive(self):
        clock = FixedClock(datetime(2026, 3, 2, tzinfo=timezone.utc))
        with pytest.raises(ValueError):
            clock.set(datetime(2026, 4, 1))


# ── Helper Tests ─────────────────────────────────────────────

class TestEnsureAware:
    def test_naive_becomes_utc(self):
        assert ensure_aware(datetime(2026, 1, 1, 8)).tzinfo == timezone.utc

    def test_aware_is_untouched(self):
        tz = timezone(timedelta(hours=3))
        dt = datetime(2026, 1, 1, 8, tzinfo=tz)
        assert ensure_aware(dt) is dt


class TestHoursBetween:
    def test_whole_hours(self):
        start = datetime(2026, 3, 1, 9, tzinfo=timezone.utc)
        assert hours_between(start, start + timedelta(hours=26)) == 26

    def test_floors_partial_hours(self):
        start = datetime(2026, 3, 1, 9, tzinfo=timezone.utc)
        assert hours_between(start, start + timedelta(hours=3, minutes=59)) == 3
