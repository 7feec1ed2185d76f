"""
Crewdesk Operation Layer: Operation Result
============================================
Every dispatched request produces exactly one OperationResult.

SUCCEEDED -> operation ran to completion, no per-item failures.
PARTIAL   -> batch ran, some items failed (see data["failures"]).
FAILED    -> operation aborted, error reason is mandatory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.commands.rejection import ErrorReason


class OperationStatus(Enum):
    SUCCEEDED = "SUCCEEDED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


@dataclass(frozen=True)
class OperationResult:
    """
    Invariants:
        - FAILED + error is None -> ValueError
        - SUCCEEDED/PARTIAL + error is not None -> ValueError
    """

    operation: str
    status: OperationStatus
    occurred_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorReason] = None
    message: str = ""

    def __post_init__(self):
        if not isinstance(self.status, OperationStatus):
            raise ValueError(
                f"status must be OperationStatus, got {type(self.status).__name__}."
            )

        if self.status == OperationStatus.FAILED and self.error is None:
            raise ValueError(
                "FAILED result must include an ErrorReason. "
                "No silent failures allowed."
            )

        if self.status != OperationStatus.FAILED and self.error is not None:
            raise ValueError(
                f"{self.status.value} result must NOT include an ErrorReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @property
    def is_success(self) -> bool:
        return self.status != OperationStatus.FAILED

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED

    def to_dict(self) -> dict:
        """JSON-shaped response body."""
        body: Dict[str, Any] = {
            "success": self.is_success,
            "operation": self.operation,
            "status": self.status.value,
        }
        if self.is_failed:
            body["error"] = self.error.to_dict()
            return body
        body.update(_jsonable(self.data))
        if self.message:
            body["message"] = self.message
        return body


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value
