"""
Manual smoke runner for the Crewdesk Django adapter endpoint.

The adapter starts with an empty in-memory Store, so every call below
exercises an error path or an empty scan: unknown operation,
validation failure, missing records, and a no-op escalation.

Usage:
    python scripts/smoke_http_api.py
    python scripts/smoke_http_api.py --base-url http://127.0.0.1:8000
"""

from __future__ import annotations

import argparse
import json
from urllib import error, request


def _call(
    *,
    method: str,
    url: str,
    body: dict | None = None,
) -> tuple[int, dict]:
    encoded = None
    req_headers = {}
    if body is not None:
        encoded = json.dumps(body).encode("utf-8")
        req_headers["Content-Type"] = "application/json"

    req = request.Request(url=url, method=method, headers=req_headers, data=encoded)
    try:
        with request.urlopen(req) as response:
            status = response.status
            payload = json.loads(response.read().decode("utf-8"))
            return status, payload
    except error.HTTPError as exc:
        payload = json.loads(exc.read().decode("utf-8"))
        return exc.code, payload


def _print_case(label: str, status: int, payload: dict) -> None:
    print(f"\n[{label}] status={status}")
    print(json.dumps(payload, indent=2, sort_keys=True))


def run(base_url: str) -> None:
    url = base_url.rstrip("/") + "/v1/business-logic"

    status, payload = _call(method="GET", url=url)
    _print_case("method-not-allowed", status, payload)

    status, payload = _call(method="POST", url=url, body={"operation": "bogus"})
    _print_case("unknown-operation", status, payload)

    status, payload = _call(
        method="POST",
        url=url,
        body={"operation": "bulk_task_assignment", "task_ids": [], "user_id": "u1"},
    )
    _print_case("validation-error", status, payload)

    status, payload = _call(
        method="POST",
        url=url,
        body={
            "operation": "cascade_task_completion",
            "task_id": "missing-task",
            "completed_by": "smoke",
        },
    )
    _print_case("task-not-found", status, payload)

    status, payload = _call(
        method="POST",
        url=url,
        body={"operation": "user_workload_balancing",
              "department_id": "housekeeping", "requested_by": "smoke"},
    )
    _print_case("empty-department", status, payload)

    status, payload = _call(
        method="POST",
        url=url,
        body={"operation": "automated_task_escalation", "overdue_hours": 24},
    )
    _print_case("escalation-nothing-overdue", status, payload)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:8000",
        help="Server base URL.",
    )
    args = parser.parse_args()
    run(args.base_url)


if __name__ == "__main__":
    main()
