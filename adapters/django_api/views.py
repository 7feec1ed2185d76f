"""
Crewdesk Django Adapter Views
===============================
One POST endpoint in front of the task rules dispatcher. The view
parses JSON, hands the body to the dispatcher and maps the result
code to an HTTP status.
"""

from __future__ import annotations

import json
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.commands.outcomes import OperationResult
from core.commands.rejection import ReasonCode


STATUS_BY_CODE = {
    ReasonCode.VALIDATION_ERROR: 400,
    ReasonCode.UNKNOWN_OPERATION: 400,
    ReasonCode.NOT_FOUND: 404,
    ReasonCode.CONCURRENCY_CONFLICT: 409,
    ReasonCode.RUN_IN_PROGRESS: 409,
    ReasonCode.STORE_ERROR: 500,
    ReasonCode.INTERNAL_ERROR: 500,
}


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        {
            "success": False,
            "status": "FAILED",
            "error": {"code": code, "message": message, "details": {}},
        },
        status=status,
    )


def _parse_json_body(request: HttpRequest) -> Any:
    if not request.body:
        return {}
    try:
        return json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc


def http_status_for(result: OperationResult) -> int:
    if result.error is None:
        return 200
    return STATUS_BY_CODE.get(result.error.code, 500)


@csrf_exempt
def business_logic_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _json_error(
            "METHOD_NOT_ALLOWED",
            "Method not allowed for this endpoint.",
            status=405,
        )

    try:
        body = _parse_json_body(request)
    except ValueError as exc:
        return _json_error(ReasonCode.VALIDATION_ERROR, str(exc), status=400)

    result = build_dependencies().dispatcher.dispatch(body)
    return JsonResponse(
        result.to_dict(),
        status=http_status_for(result),
        encoder=DjangoJSONEncoder,
    )
