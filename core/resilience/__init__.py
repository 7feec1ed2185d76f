"""
Crewdesk Core Resilience: Public API
======================================
Execution budgets and exclusive-run guards for long scans.
"""

from core.resilience.budget import BudgetTracker
from core.resilience.guard import ExclusiveRunGuard, RunInProgress

__all__ = [
    "BudgetTracker",
    "ExclusiveRunGuard",
    "RunInProgress",
]
