"""Helpers shared by the upstream-backed tool handlers."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from gmp_mcp.protocol.models import ToolResponse
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.errors import serialize_error, upstream_error_message

logger = logging.getLogger(__name__)

UpstreamCall = Callable[[], Awaitable[httpx.Response]]


def _body(response: httpx.Response) -> Any:
    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text


def success_response(response: httpx.Response) -> ToolResponse:
    """Wrap a 2xx upstream body as ``{"response": {"contexts": ...}, "status": "200"}``.

    Bodies that are not JSON are passed through as text.
    """
    payload = {
        "response": {"contexts": _body(response)},
        "status": str(response.status_code),
    }
    return ToolResponse.from_text(json.dumps(payload))


async def call_upstream(
    tool_name: str,
    call: UpstreamCall,
    log: ToolLogger,
    *,
    fallback_text: str = "",
) -> ToolResponse:
    """Run one upstream call and map HTTP/transport failures to text.

    Only ``httpx`` errors are handled here; anything else (a missing API
    key, for instance) propagates to the handler.
    """
    try:
        response = await call()
    except httpx.HTTPError as exc:
        message = upstream_error_message(exc)
        await log.error(f"Error executing tool {tool_name}: {exc} \nErrorMessage: {message}")
        return ToolResponse.from_text(message or fallback_text)
    return success_response(response)


async def tool_failure(tool_name: str, exc: Exception, log: ToolLogger) -> ToolResponse:
    """The outer error layer: log and return the serialized exception."""
    logger.debug("Tool %s failed outside the upstream call", tool_name, exc_info=exc)
    await log.error(f"Error executing tool {tool_name}: {exc}")
    return ToolResponse.from_text(serialize_error(exc))
