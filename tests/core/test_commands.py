"""
Crewdesk Operation Layer: Tests
==================================
Request parsing, parameter validation, result invariants and
dispatcher error mapping. The dispatcher must never raise.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.commands import (
    ErrorReason,
    OperationDispatcher,
    OperationRequest,
    OperationResult,
    OperationStatus,
    OperationValidationError,
    ReasonCode,
    optional_str,
    require_choice,
    require_datetime,
    require_number,
    require_str,
    require_str_list,
)
from core.resilience.guard import RunInProgress
from core.store.errors import ConcurrencyConflict, NotFound, StoreError
from core.time.clock import FixedClock

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class RecordingHandler:
    def __init__(self, result=None, raises=None):
        self.calls = []
        self._result = result if result is not None else {"ok": True}
        self._raises = raises

    def execute(self, params):
        self.calls.append(params)
        if self._raises is not None:
            raise self._raises
        return dict(self._result)


@pytest.fixture
def dispatcher():
    return OperationDispatcher(clock=FixedClock(T0))


# ══════════════════════════════════════════════════════════════
# REQUEST + VALIDATION
# ══════════════════════════════════════════════════════════════

class TestOperationRequest:
    def test_splits_operation_from_params(self):
        request = OperationRequest.from_payload(
            {"operation": "cascade_task_completion", "task_id": "t-1"}
        )
        assert request.operation == "cascade_task_completion"
        assert request.params == {"task_id": "t-1"}

    def test_non_object_payload(self):
        with pytest.raises(OperationValidationError) as exc_info:
            OperationRequest.from_payload(["nope"])
        assert exc_info.value.code == ReasonCode.VALIDATION_ERROR

    def test_missing_operation(self):
        with pytest.raises(OperationValidationError) as exc_info:
            OperationRequest.from_payload({"task_id": "t-1"})
        assert exc_info.value.code == ReasonCode.UNKNOWN_OPERATION
        assert exc_info.value.field == "operation"


class TestValidators:
    def test_require_str(self):
        assert require_str({"a": " x "}, "a") == "x"
        with pytest.raises(OperationValidationError):
            require_str({"a": "  "}, "a")
        with pytest.raises(OperationValidationError):
            require_str({}, "a")

    def test_optional_str(self):
        assert optional_str({}, "a") is None
        assert optional_str({"a": ""}, "a") is None
        assert optional_str({"a": "d-1"}, "a") == "d-1"

    def test_require_str_list(self):
        assert require_str_list({"ids": ["a", "b"]}, "ids") == ("a", "b")
        with pytest.raises(OperationValidationError):
            require_str_list({"ids": []}, "ids")
        with pytest.raises(OperationValidationError):
            require_str_list({"ids": ["a", 3]}, "ids")
        with pytest.raises(OperationValidationError):
            require_str_list({"ids": "a"}, "ids")

    def test_require_number(self):
        assert require_number({"h": 24}, "h", minimum=0) == 24.0
        with pytest.raises(OperationValidationError):
            require_number({"h": -1}, "h", minimum=0)
        with pytest.raises(OperationValidationError):
            require_number({"h": True}, "h")
        with pytest.raises(OperationValidationError):
            require_number({"h": "24"}, "h")

    def test_require_number_bounds(self):
        assert require_number({"h": 100}, "h", maximum=100) == 100.0
        with pytest.raises(OperationValidationError, match="<= 100"):
            require_number({"h": 101}, "h", maximum=100)
        with pytest.raises(OperationValidationError, match="<= 100"):
            require_number({"h": 10 ** 400}, "h", maximum=100)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_require_number_rejects_non_finite(self, value):
        with pytest.raises(OperationValidationError, match="finite"):
            require_number({"h": value}, "h", minimum=0)

    def test_require_choice(self):
        assert require_choice({"t": "overdue"}, "t", {"overdue", "deadline"}) == "overdue"
        with pytest.raises(OperationValidationError, match="must be one of"):
            require_choice({"t": "escalation"}, "t", {"overdue", "deadline"})

    def test_require_datetime(self):
        parsed = require_datetime({"d": "2026-03-02T09:00:00Z"}, "d")
        assert parsed == T0
        naive = require_datetime({"d": "2026-03-02T09:00:00"}, "d")
        assert naive.tzinfo == timezone.utc
        with pytest.raises(OperationValidationError):
            require_datetime({"d": "yesterday"}, "d")


# ══════════════════════════════════════════════════════════════
# RESULT INVARIANTS
# ══════════════════════════════════════════════════════════════

class TestOperationResult:
    def test_failed_requires_error(self):
        with pytest.raises(ValueError, match="No silent failures"):
            OperationResult(operation="x", status=OperationStatus.FAILED, occurred_at=T0)

    def test_success_rejects_error(self):
        with pytest.raises(ValueError):
            OperationResult(
                operation="x",
                status=OperationStatus.SUCCEEDED,
                occurred_at=T0,
                error=ErrorReason(code="X", message="y"),
            )

    def test_error_reason_requires_code_and_message(self):
        with pytest.raises(ValueError):
            ErrorReason(code="", message="y")
        with pytest.raises(ValueError):
            ErrorReason(code="X", message="")

    def test_success_body(self):
        result = OperationResult(
            operation="x",
            status=OperationStatus.SUCCEEDED,
            occurred_at=T0,
            data={"when": T0, "items": [T0]},
            message="done",
        )
        body = result.to_dict()
        assert body["success"] is True
        assert body["status"] == "SUCCEEDED"
        assert body["when"] == T0.isoformat()
        assert body["items"] == [T0.isoformat()]
        assert body["message"] == "done"

    def test_failed_body(self):
        result = OperationResult(
            operation="x",
            status=OperationStatus.FAILED,
            occurred_at=T0,
            error=ErrorReason(code="NOT_FOUND", message="gone", details={"id": "t"}),
        )
        assert result.to_dict() == {
            "success": False,
            "operation": "x",
            "status": "FAILED",
            "error": {"code": "NOT_FOUND", "message": "gone", "details": {"id": "t"}},
        }


# ══════════════════════════════════════════════════════════════
# DISPATCHER
# ══════════════════════════════════════════════════════════════

class TestRegistration:
    def test_duplicate_rejected(self, dispatcher):
        dispatcher.register_handler("op", RecordingHandler())
        with pytest.raises(ValueError, match="already registered"):
            dispatcher.register_handler("op", RecordingHandler())

    def test_handler_needs_execute(self, dispatcher):
        with pytest.raises(TypeError):
            dispatcher.register_handler("op", object())

    def test_operations(self, dispatcher):
        dispatcher.register_handler("a", RecordingHandler())
        dispatcher.register_handler("b", RecordingHandler())
        assert dispatcher.operations == frozenset({"a", "b"})


class TestDispatch:
    def test_success_passes_params_and_message(self, dispatcher):
        handler = RecordingHandler(result={"count": 2, "message": "two done"})
        dispatcher.register_handler("op", handler)

        result = dispatcher.dispatch({"operation": "op", "x": 1})

        assert handler.calls == [{"x": 1}]
        assert result.status == OperationStatus.SUCCEEDED
        assert result.data == {"count": 2}
        assert result.message == "two done"
        assert result.occurred_at == T0

    def test_failures_mark_partial(self, dispatcher):
        dispatcher.register_handler(
            "op", RecordingHandler(result={"failures": [{"task_id": "t"}]})
        )
        assert dispatcher.dispatch({"operation": "op"}).status == OperationStatus.PARTIAL

    def test_empty_failures_is_success(self, dispatcher):
        dispatcher.register_handler("op", RecordingHandler(result={"failures": []}))
        assert dispatcher.dispatch({"operation": "op"}).status == OperationStatus.SUCCEEDED

    def test_unknown_operation_invokes_nothing(self, dispatcher):
        handler = RecordingHandler()
        dispatcher.register_handler("op", handler)

        result = dispatcher.dispatch({"operation": "drop_tables"})

        assert result.is_failed
        assert result.error.code == ReasonCode.UNKNOWN_OPERATION
        assert handler.calls == []

    def test_missing_operation(self, dispatcher):
        result = dispatcher.dispatch({"task_id": "t-1"})
        assert result.error.code == ReasonCode.UNKNOWN_OPERATION

    def test_non_object_payload(self, dispatcher):
        result = dispatcher.dispatch("not json object")
        assert result.error.code == ReasonCode.VALIDATION_ERROR

    @pytest.mark.parametrize(
        "exc, code",
        [
            (OperationValidationError("bad", field="task_id"), ReasonCode.VALIDATION_ERROR),
            (NotFound("tasks", "t-1"), ReasonCode.NOT_FOUND),
            (ConcurrencyConflict("tasks", "t-1", {"version": 1}), ReasonCode.CONCURRENCY_CONFLICT),
            (StoreError("db down"), ReasonCode.STORE_ERROR),
            (RunInProgress("automated_task_escalation"), ReasonCode.RUN_IN_PROGRESS),
            (RuntimeError("boom"), ReasonCode.INTERNAL_ERROR),
        ],
    )
    def test_exceptions_map_to_codes(self, dispatcher, exc, code):
        dispatcher.register_handler("op", RecordingHandler(raises=exc))

        result = dispatcher.dispatch({"operation": "op"})

        assert result.is_failed
        assert result.error.code == code
        assert result.error.operation == "op"

    def test_validation_details_carry_field(self, dispatcher):
        dispatcher.register_handler(
            "op", RecordingHandler(raises=OperationValidationError("bad", field="task_id"))
        )
        result = dispatcher.dispatch({"operation": "op"})
        assert result.error.details == {"field": "task_id"}

    def test_not_found_details(self, dispatcher):
        dispatcher.register_handler("op", RecordingHandler(raises=NotFound("tasks", "t-9")))
        result = dispatcher.dispatch({"operation": "op"})
        assert result.error.details == {"entity": "tasks", "id": "t-9"}

    def test_internal_error_hides_exception_text(self, dispatcher):
        dispatcher.register_handler("op", RecordingHandler(raises=RuntimeError("secret")))
        result = dispatcher.dispatch({"operation": "op"})
        assert "secret" not in result.error.message
