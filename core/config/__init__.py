"""
Crewdesk Core Config: Public API
==================================
Named, admin-configurable rules for the task rules engine.
No scoring weight or threshold is hardcoded in engine logic.
"""

from core.config.rules import (
    EscalationRules,
    ExecutionBudget,
    RulesConfig,
    WorkloadRules,
    load_rules,
)

__all__ = [
    "WorkloadRules",
    "EscalationRules",
    "ExecutionBudget",
    "RulesConfig",
    "load_rules",
]
