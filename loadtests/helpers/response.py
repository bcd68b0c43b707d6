"""Response error extraction for load test observability.

API errors arrive in the envelope ``{"success": false, "message": "...",
"error": {"field": ["msg", ...]}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact, human-readable error message from an API error response."""
    try:
        body = response.json()
    except ValueError:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])[:300]

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error:
        return " | ".join(f"{k}: {', '.join(map(str, v)) if isinstance(v, list) else v}" for k, v in error.items())

    return str(body)[:300]
