"""Response error extraction for load test observability.

Parses Warehousing API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storage outcomes (409/422): {"error": "capacity_exceeded", "messages": {"capacity": ["..."]}, "detail": {...}}
- Protean errors (400/404): {"error": "msg"} or {"error": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def _flatten(messages: dict) -> str:
    parts = []
    for key, value in messages.items():
        text = "; ".join(str(v) for v in value) if isinstance(value, list) else str(value)
        parts.append(f"{key}: {text}")
    return " | ".join(parts)


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if isinstance(body.get("messages"), dict):
        return f"{body.get('error')}: {_flatten(body['messages'])}"

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return _flatten(error)
        return str(error)

    return str(body)[:300]


def is_capacity_rejection(response: Response) -> bool:
    """True for the expected 409 a full shelf returns."""
    if response.status_code != 409:
        return False
    try:
        return response.json().get("error") == "capacity_exceeded"
    except ValueError:
        return False
