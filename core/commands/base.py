"""
Crewdesk Operation Layer: Operation Request
=============================================
A discriminated request: the `operation` field names the component
to run, every other field is a parameter for it.

An OperationRequest carries intent only. Parameter validation
belongs to the per-operation request contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from core.commands.rejection import ReasonCode
from core.commands.validator import OperationValidationError


@dataclass(frozen=True)
class OperationRequest:
    operation: str
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.operation or not isinstance(self.operation, str):
            raise OperationValidationError("operation must be a non-empty string.")
        if not isinstance(self.params, dict):
            raise OperationValidationError("params must be a dict.")

    @classmethod
    def from_payload(cls, payload: Any) -> "OperationRequest":
        """
        Split a raw JSON object into operation name + params.

        {"operation": "cascade_task_completion", "task_id": "t-1", ...}
        """
        if not isinstance(payload, Mapping):
            raise OperationValidationError("Request body must be a JSON object.")
        params = dict(payload)
        operation = params.pop("operation", None)
        if not isinstance(operation, str) or not operation.strip():
            raise OperationValidationError(
                "operation is required.",
                code=ReasonCode.UNKNOWN_OPERATION,
                field="operation",
            )
        return cls(operation=operation.strip(), params=params)
