"""Response error extraction for load test observability.

Parses marketplace API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Domain errors (400/403/404/409): {"error": "msg", "code": "...", "details": {...}}
- Internal errors (500): {"error": "Internal server error", "correlation_id": "..."}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def error_code(response: Response) -> str | None:
    """Return the domain error code (``insufficient_stock``, ``conflict``...) if any."""
    try:
        body = response.json()
    except Exception:
        return None
    return body.get("code") if isinstance(body, dict) else None


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        message = str(body["error"])
        if body.get("correlation_id"):
            return f"{message} (correlation_id={body['correlation_id']})"
        if isinstance(body.get("details"), dict):
            details = " | ".join(f"{k}: {v}" for k, v in body["details"].items())
            return f"{message} [{details}]"
        return message

    return str(body)[:300]
