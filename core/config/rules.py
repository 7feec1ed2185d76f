"""
Crewdesk Core Config: Rules
=============================
Frozen rule objects consumed by the engine services. Defaults match
the documented contract (weights 1/2/3, thresholds 5/15); a
deployment may override them through the CREWDESK_RULES setting.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional, Tuple


# ══════════════════════════════════════════════════════════════
# WORKLOAD RULES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkloadRules:
    """
    Workload scoring and rebalancing parameters.

    score = task_weight * open_tasks
          + high_priority_weight * high_priority_tasks
          + overdue_weight * overdue_tasks

    score < underloaded_below  -> underloaded
    score > overloaded_above   -> overloaded
    otherwise                  -> balanced (both bounds inclusive)
    """

    task_weight: int = 1
    high_priority_weight: int = 2
    overdue_weight: int = 3
    underloaded_below: int = 5
    overloaded_above: int = 15
    unassigned_pool_limit: int = 10
    tasks_per_recommendation: int = 3
    overloaded_users_considered: int = 2

    def __post_init__(self) -> None:
        for name in ("task_weight", "high_priority_weight", "overdue_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0.")
        if self.underloaded_below > self.overloaded_above:
            raise ValueError(
                "underloaded_below must be <= overloaded_above."
            )
        for name in (
            "unassigned_pool_limit",
            "tasks_per_recommendation",
            "overloaded_users_considered",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1.")


# ══════════════════════════════════════════════════════════════
# ESCALATION RULES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EscalationRules:
    """Who receives escalations and as which actor the scan runs."""

    manager_roles: Tuple[str, ...] = ("manager", "admin")
    system_actor_id: str = "system"

    def __post_init__(self) -> None:
        if not self.manager_roles:
            raise ValueError("manager_roles must be non-empty.")
        if not self.system_actor_id:
            raise ValueError("system_actor_id must be non-empty.")


# ══════════════════════════════════════════════════════════════
# EXECUTION BUDGET
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ExecutionBudget:
    """
    Per-invocation cap for long scans.

    max_items:   Items processed before the scan stops early.
    max_seconds: Wall-clock seconds before the scan stops early.
    """

    max_items: int = 500
    max_seconds: float = 25.0

    def __post_init__(self) -> None:
        if self.max_items < 1:
            raise ValueError("max_items must be >= 1.")
        if self.max_seconds <= 0:
            raise ValueError("max_seconds must be > 0.")


# ══════════════════════════════════════════════════════════════
# AGGREGATE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RulesConfig:
    workload: WorkloadRules = field(default_factory=WorkloadRules)
    escalation: EscalationRules = field(default_factory=EscalationRules)
    budget: ExecutionBudget = field(default_factory=ExecutionBudget)


def _build(cls, values: Optional[Mapping[str, Any]]):
    if not values:
        return cls()
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(
            f"Unknown {cls.__name__} keys: {sorted(unknown)}. "
            f"Allowed: {sorted(known)}"
        )
    kwargs = dict(values)
    if "manager_roles" in kwargs:
        kwargs["manager_roles"] = tuple(kwargs["manager_roles"])
    return cls(**kwargs)


def load_rules(mapping: Optional[Mapping[str, Any]] = None) -> RulesConfig:
    """
    Build RulesConfig from a settings mapping such as:

        CREWDESK_RULES = {
            "workload": {"overloaded_above": 20},
            "escalation": {"manager_roles": ["manager", "admin"]},
            "budget": {"max_items": 200, "max_seconds": 10},
        }
    """
    mapping = mapping or {}
    unknown = set(mapping) - {"workload", "escalation", "budget"}
    if unknown:
        raise ValueError(f"Unknown rules sections: {sorted(unknown)}.")
    return RulesConfig(
        workload=_build(WorkloadRules, mapping.get("workload")),
        escalation=_build(EscalationRules, mapping.get("escalation")),
        budget=_build(ExecutionBudget, mapping.get("budget")),
    )
