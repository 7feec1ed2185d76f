"""Crewdesk Task Rules Engine: Services + Dispatcher Wiring"""
from __future__ import annotations

from typing import Any, Optional

from core.commands.dispatcher import OperationDispatcher
from core.config.rules import RulesConfig
from core.resilience.guard import ExclusiveRunGuard
from core.store.protocol import Store
from core.time.clock import Clock
from engines.task_rules.events import (
    OP_AUTOMATED_TASK_ESCALATION, OP_BATCH_REMINDER_CREATION,
    OP_BULK_TASK_ASSIGNMENT, OP_CASCADE_TASK_COMPLETION,
    OP_DEPARTMENT_PERFORMANCE_ANALYSIS, OP_USER_WORKLOAD_BALANCING,
)
from engines.task_rules.services.assignment import BulkAssigner
from engines.task_rules.services.dependencies import DependencyResolver
from engines.task_rules.services.escalation import EscalationScanner
from engines.task_rules.services.performance import DepartmentPerformanceAnalyzer
from engines.task_rules.services.reminders import BatchReminderCreator
from engines.task_rules.services.workload import Rebalancer, WorkloadScorer


def build_task_rules_dispatcher(
    store: Store,
    audit_sink: Any = None,
    clock: Optional[Clock] = None,
    rules: Optional[RulesConfig] = None,
    guard: Optional[ExclusiveRunGuard] = None,
) -> OperationDispatcher:
    """One dispatcher with every task rules operation registered."""
    deps = {"store": store, "audit_sink": audit_sink, "clock": clock, "rules": rules}

    dispatcher = OperationDispatcher(clock=clock)
    dispatcher.register_handler(OP_BULK_TASK_ASSIGNMENT, BulkAssigner(**deps))
    dispatcher.register_handler(OP_CASCADE_TASK_COMPLETION, DependencyResolver(**deps))
    dispatcher.register_handler(OP_USER_WORKLOAD_BALANCING, Rebalancer(**deps))
    dispatcher.register_handler(
        OP_AUTOMATED_TASK_ESCALATION, EscalationScanner(guard=guard, **deps)
    )
    dispatcher.register_handler(OP_BATCH_REMINDER_CREATION, BatchReminderCreator(**deps))
    dispatcher.register_handler(
        OP_DEPARTMENT_PERFORMANCE_ANALYSIS, DepartmentPerformanceAnalyzer(**deps)
    )
    return dispatcher


__all__ = [
    "BatchReminderCreator",
    "BulkAssigner",
    "DepartmentPerformanceAnalyzer",
    "DependencyResolver",
    "EscalationScanner",
    "Rebalancer",
    "WorkloadScorer",
    "build_task_rules_dispatcher",
]
