"""
Crewdesk Operation Layer: Parameter Validation
================================================
Helpers used by the request contracts to check raw JSON params.

Validation happens before any Store access. A failure raises
OperationValidationError (structured, carries the field name).
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from core.commands.rejection import ReasonCode
from core.time.clock import ensure_aware


class OperationValidationError(Exception):
    """Structured validation failure for operation params."""

    def __init__(
        self,
        message: str,
        *,
        code: str = ReasonCode.VALIDATION_ERROR,
        field: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.field = field
        super().__init__(f"[{code}] {message}")


# ══════════════════════════════════════════════════════════════
# FIELD HELPERS
# ══════════════════════════════════════════════════════════════

def require_str(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str) or not value.strip():
        raise OperationValidationError(
            f"{name} must be a non-empty string.", field=name
        )
    return value.strip()


def optional_str(params: Mapping[str, Any], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None or value == "":
        return None
    return require_str(params, name)


def require_str_list(params: Mapping[str, Any], name: str) -> tuple[str, ...]:
    value = params.get(name)
    if not isinstance(value, (list, tuple)) or not value:
        raise OperationValidationError(
            f"{name} must be a non-empty list of ids.", field=name
        )
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise OperationValidationError(
                f"{name} must contain only non-empty strings.", field=name
            )
    return tuple(item.strip() for item in value)


def require_number(
    params: Mapping[str, Any],
    name: str,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> float:
    value = params.get(name)
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OperationValidationError(f"{name} must be a number.", field=name)
    if isinstance(value, float) and not math.isfinite(value):
        raise OperationValidationError(f"{name} must be a finite number.", field=name)
    if minimum is not None and value < minimum:
        raise OperationValidationError(
            f"{name} must be >= {minimum}.", field=name
        )
    if maximum is not None and value > maximum:
        raise OperationValidationError(
            f"{name} must be <= {maximum}.", field=name
        )
    return float(value)


def require_choice(
    params: Mapping[str, Any], name: str, choices: Iterable[str]
) -> str:
    allowed = frozenset(choices)
    value = require_str(params, name)
    if value not in allowed:
        raise OperationValidationError(
            f"{name} must be one of {sorted(allowed)}.", field=name
        )
    return value


def require_datetime(params: Mapping[str, Any], name: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    value = params.get(name)
    if isinstance(value, datetime):
        return ensure_aware(value)
    if not isinstance(value, str) or not value.strip():
        raise OperationValidationError(
            f"{name} must be an ISO-8601 timestamp.", field=name
        )
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise OperationValidationError(
            f"{name} must be an ISO-8601 timestamp.", field=name
        ) from exc
    return ensure_aware(parsed)
