"""
Tests for core.config: rules dataclasses and settings loading.
"""

import pytest

from core.config import (
    EscalationRules,
    ExecutionBudget,
    RulesConfig,
    WorkloadRules,
    load_rules,
)


class TestWorkloadRules:
    def test_defaults(self):
        rules = WorkloadRules()
        assert (rules.task_weight, rules.high_priority_weight, rules.overdue_weight) == (1, 2, 3)
        assert rules.underloaded_below == 5
        assert rules.overloaded_above == 15
        assert rules.unassigned_pool_limit == 10
        assert rules.tasks_per_recommendation == 3
        assert rules.overloaded_users_considered == 2

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="overdue_weight"):
            WorkloadRules(overdue_weight=-1)

    def test_inverted_thresholds_rejected(self):
        with pytest.raises(ValueError):
            WorkloadRules(underloaded_below=20, overloaded_above=10)

    def test_zero_pool_rejected(self):
        with pytest.raises(ValueError, match="unassigned_pool_limit"):
            WorkloadRules(unassigned_pool_limit=0)


class TestEscalationRules:
    def test_defaults(self):
        rules = EscalationRules()
        assert rules.manager_roles == ("manager", "admin")
        assert rules.system_actor_id == "system"

    def test_empty_roles_rejected(self):
        with pytest.raises(ValueError):
            EscalationRules(manager_roles=())


class TestExecutionBudget:
    def test_invalid_limits(self):
        with pytest.raises(ValueError):
            ExecutionBudget(max_items=0)
        with pytest.raises(ValueError):
            ExecutionBudget(max_seconds=0)


class TestLoadRules:
    def test_none_gives_defaults(self):
        assert load_rules(None) == RulesConfig()

    def test_partial_override(self):
        rules = load_rules({
            "workload": {"overloaded_above": 20},
            "escalation": {"manager_roles": ["supervisor"]},
            "budget": {"max_items": 10},
        })
        assert rules.workload.overloaded_above == 20
        assert rules.workload.underloaded_below == 5
        assert rules.escalation.manager_roles == ("supervisor",)
        assert rules.budget.max_items == 10
        assert rules.budget.max_seconds == 25.0

    def test_unknown_section(self):
        with pytest.raises(ValueError, match="Unknown rules sections"):
            load_rules({"scoring": {}})

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown WorkloadRules keys"):
            load_rules({"workload": {"weight": 4}})
