"""
Crewdesk Core Time: Clock Protocol
====================================
Every rules-engine component receives a Clock at construction.
"Now" is read once per operation so that cutoffs, overdue checks
and completion stamps inside one call agree with each other.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time (timezone-aware)."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock backed by the system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock pinned to a timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
        clock.advance(hours=5)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, *, hours: float = 0, minutes: float = 0, seconds: float = 0) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(
            hours=hours, minutes=minutes, seconds=seconds
        )

    def set(self, dt: datetime) -> None:
        if dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = dt


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes coming from storage or requests as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def hours_between(earlier: datetime, later: datetime) -> int:
    """Whole hours elapsed from `earlier` to `later` (floored)."""
    return math.floor((later - earlier).total_seconds() / 3600)
