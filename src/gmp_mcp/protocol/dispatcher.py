"""ToolDispatcher — resolves a tool call by name and runs its handler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.tools.errors import serialize_error
from gmp_mcp.utils.telemetry import ATTR_TOOL_NAME, ATTR_TOOL_STATUS, get_tracer

if TYPE_CHECKING:
    from gmp_mcp.protocol.registry import ToolRegistry
    from gmp_mcp.protocol.sink import ToolLogger

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

INVALID_TOOL_TEXT = "Invalid Tool called"


class ToolDispatcher:
    """Routes tool calls to the handlers of a :class:`ToolRegistry`.

    Tool resolution failures and handler exceptions are turned into
    ordinary envelopes; nothing raised by a single tool call escapes
    :meth:`dispatch`.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def dispatch(self, request: ToolCallRequest, log: ToolLogger) -> ToolResponse:
        with _tracer.start_as_current_span("tool.dispatch") as span:
            span.set_attribute(ATTR_TOOL_NAME, request.name)
            tool = self._registry.get(request.name)
            if tool is None:
                span.set_attribute(ATTR_TOOL_STATUS, "not_found")
                await log.info(f"Tool not found: {request.name}")
                return ToolResponse.from_text(INVALID_TOOL_TEXT)

            try:
                response = await tool.handler(request, log)
            except Exception as exc:
                span.set_attribute(ATTR_TOOL_STATUS, "error")
                logger.exception("Tool %s raised", request.name)
                await log.error(f"Error executing tool {request.name}: {exc}")
                return ToolResponse.from_text(serialize_error(exc))

            span.set_attribute(ATTR_TOOL_STATUS, "ok")
            return response
