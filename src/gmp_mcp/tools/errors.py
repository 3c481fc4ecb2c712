"""Error-to-text mapping shared by the tool handlers."""

from __future__ import annotations

import json
from typing import Any

import httpx


def upstream_error_message(exc: BaseException) -> str:
    """Extract ``error.message`` from a structured upstream error body.

    Returns ``""`` when *exc* carries no HTTP response or the body is not a
    Google-style ``{"error": {"message": ...}}`` document.
    """
    if not isinstance(exc, httpx.HTTPStatusError):
        return ""
    try:
        body: Any = exc.response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return ""


def serialize_error(exc: BaseException) -> str:
    """JSON-serialize an exception for the outer error layer of a handler."""
    payload: dict[str, Any] = {"name": type(exc).__name__, "message": str(exc)}
    return json.dumps(payload)
