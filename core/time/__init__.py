"""
Crewdesk Core Time: Public API
================================
Injectable clock for the rules engine.
Rule: engine code never calls datetime.now() directly.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    ensure_aware,
    hours_between,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "ensure_aware",
    "hours_between",
]
