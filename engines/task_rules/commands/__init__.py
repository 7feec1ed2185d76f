"""
Crewdesk Task Rules Engine: Request Contracts
===============================================
One frozen request per operation. `from_params` validates the raw
JSON params and raises OperationValidationError before any Store
access happens.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from core.commands.validator import (
    OperationValidationError,
    optional_str,
    require_choice,
    require_datetime,
    require_number,
    require_str,
    require_str_list,
)
from engines.task_rules.events import BATCH_REMINDER_TYPES

# One century. Keeps the escalation cutoff inside the datetime range.
MAX_OVERDUE_HOURS = 24 * 365 * 100


@dataclass(frozen=True)
class BulkTaskAssignmentRequest:
    task_ids: Tuple[str, ...]
    user_id:  str
    assigned_by: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "BulkTaskAssignmentRequest":
        return cls(
            task_ids=require_str_list(params, "task_ids"),
            user_id=require_str(params, "user_id"),
            assigned_by=require_str(params, "assigned_by"),
        )


@dataclass(frozen=True)
class CascadeTaskCompletionRequest:
    task_id:      str
    completed_by: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "CascadeTaskCompletionRequest":
        return cls(
            task_id=require_str(params, "task_id"),
            completed_by=require_str(params, "completed_by"),
        )


@dataclass(frozen=True)
class UserWorkloadBalancingRequest:
    department_id: str
    requested_by:  str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "UserWorkloadBalancingRequest":
        return cls(
            department_id=require_str(params, "department_id"),
            requested_by=require_str(params, "requested_by"),
        )


@dataclass(frozen=True)
class AutomatedTaskEscalationRequest:
    overdue_hours: float
    department_id: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AutomatedTaskEscalationRequest":
        return cls(
            overdue_hours=require_number(
                params, "overdue_hours", minimum=0, maximum=MAX_OVERDUE_HOURS
            ),
            department_id=optional_str(params, "department_id"),
        )


@dataclass(frozen=True)
class BatchReminderCreationRequest:
    task_ids:      Tuple[str, ...]
    reminder_type: str
    scheduled_for: datetime
    created_by:    str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "BatchReminderCreationRequest":
        return cls(
            task_ids=require_str_list(params, "task_ids"),
            reminder_type=require_choice(params, "reminder_type", BATCH_REMINDER_TYPES),
            scheduled_for=require_datetime(params, "scheduled_for"),
            created_by=require_str(params, "created_by"),
        )


@dataclass(frozen=True)
class DepartmentPerformanceAnalysisRequest:
    department_id: str
    start_date:    datetime
    end_date:      datetime

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise OperationValidationError(
                "start_date must be <= end_date.", field="start_date"
            )

    @classmethod
    def from_params(
        cls, params: Mapping[str, Any]
    ) -> "DepartmentPerformanceAnalysisRequest":
        return cls(
            department_id=require_str(params, "department_id"),
            start_date=require_datetime(params, "start_date"),
            end_date=require_datetime(params, "end_date"),
        )
