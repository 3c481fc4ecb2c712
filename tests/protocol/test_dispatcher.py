"""Tests for ToolDispatcher routing."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

from gmp_mcp.protocol.dispatcher import INVALID_TOOL_TEXT, ToolDispatcher
from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor, ToolRegistry
from gmp_mcp.protocol.sink import ToolLogger
from tests.helpers import CapturingNotifier


def _registry(handler: AsyncMock) -> ToolRegistry:
    return ToolRegistry([ToolDescriptor(name="tool_a", description="", input_schema={}, handler=handler)])


class TestToolDispatcher:
    async def test_routes_to_handler(self, log: ToolLogger) -> None:
        handler = AsyncMock(return_value=ToolResponse.from_text("done"))
        dispatcher = ToolDispatcher(_registry(handler))
        request = ToolCallRequest(name="tool_a", arguments={"x": 1})

        response = await dispatcher.dispatch(request, log)

        assert response.text == "done"
        handler.assert_awaited_once_with(request, log)

    async def test_unknown_tool(self, log: ToolLogger) -> None:
        handler = AsyncMock()
        dispatcher = ToolDispatcher(_registry(handler))

        response = await dispatcher.dispatch(ToolCallRequest(name="nope"), log)

        assert response.text == INVALID_TOOL_TEXT == "Invalid Tool called"
        handler.assert_not_awaited()

    async def test_unknown_tool_is_logged(self) -> None:
        notifier = CapturingNotifier()
        dispatcher = ToolDispatcher(ToolRegistry())

        await dispatcher.dispatch(ToolCallRequest(name="nope"), ToolLogger("t", notifier=notifier))

        assert notifier.messages[0]["params"]["data"] == "Tool not found: nope"

    async def test_handler_exception_becomes_envelope(self, log: ToolLogger) -> None:
        handler = AsyncMock(side_effect=RuntimeError("boom"))
        dispatcher = ToolDispatcher(_registry(handler))

        response = await dispatcher.dispatch(ToolCallRequest(name="tool_a"), log)

        assert json.loads(response.text) == {"name": "RuntimeError", "message": "boom"}

    def test_registry_property(self) -> None:
        registry = ToolRegistry()
        assert ToolDispatcher(registry).registry is registry
