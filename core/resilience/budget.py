"""
Crewdesk Core Resilience: Execution Budget Tracker
====================================================
Long scans (escalation, workload rebalancing) run inside an HTTP
request or a scheduler tick with a hard time limit. A BudgetTracker
tells the scan when to stop: item cap reached, wall-clock budget
spent, or an external cancellation requested.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from core.config.rules import ExecutionBudget
from core.time.clock import Clock

logger = logging.getLogger("crewdesk.rules")


class BudgetTracker:
    """
    Usage:
        tracker = BudgetTracker(budget, clock, label="escalation")
        for item in items:
            if tracker.exhausted():
                break
            ...
            tracker.consume()
    """

    def __init__(
        self,
        budget: ExecutionBudget,
        clock: Clock,
        *,
        label: str,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._budget = budget
        self._clock = clock
        self._label = label
        self._should_cancel = should_cancel
        self._started_at = clock.now_utc()
        self._consumed = 0
        self._stop_reason: Optional[str] = None

    @property
    def consumed(self) -> int:
        return self._consumed

    @property
    def stop_reason(self) -> Optional[str]:
        return self._stop_reason

    @property
    def truncated(self) -> bool:
        return self._stop_reason is not None

    def consume(self, count: int = 1) -> None:
        self._consumed += count

    def exhausted(self) -> bool:
        """True once any limit is hit. Sticky: stays True afterwards."""
        if self._stop_reason is not None:
            return True

        if self._should_cancel is not None and self._should_cancel():
            self._stop("cancelled")
        elif self._consumed >= self._budget.max_items:
            self._stop(f"item budget of {self._budget.max_items} reached")
        else:
            elapsed = (self._clock.now_utc() - self._started_at).total_seconds()
            if elapsed >= self._budget.max_seconds:
                self._stop(f"time budget of {self._budget.max_seconds}s spent")

        return self._stop_reason is not None

    def _stop(self, reason: str) -> None:
        self._stop_reason = reason
        logger.warning(
            f"{self._label} stopped early after {self._consumed} items: {reason}"
        )
