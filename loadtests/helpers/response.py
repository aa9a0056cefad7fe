"""Response error extraction for load test logging.

Storefront failures share one envelope: ``{"errorMessage": "...", ...}``,
optionally with ``errors`` (field problems) or ``unavailableItems``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """A compact, human-readable error string for Locust failure messages."""
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "errorMessage" not in body:
        return str(body)[:300]

    message = body["errorMessage"]
    unavailable = body.get("unavailableItems")
    if unavailable:
        reasons = " | ".join(f"{item.get('name')}: {item.get('reason')}" for item in unavailable)
        return f"{message} ({reasons})"
    return message
