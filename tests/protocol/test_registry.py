"""Tests for ToolRegistry."""

from __future__ import annotations

import pytest

from gmp_mcp.errors import ToolRegistrationError
from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor, ToolRegistry
from gmp_mcp.protocol.sink import ToolLogger


async def _echo(request: ToolCallRequest, log: ToolLogger) -> ToolResponse:
    return ToolResponse.from_text(request.name)


def _tool(name: str) -> ToolDescriptor:
    return ToolDescriptor(name=name, description=f"{name} tool", input_schema={"type": "object"}, handler=_echo)


class TestToolRegistry:
    def test_register_and_get(self) -> None:
        registry = ToolRegistry()
        tool = _tool("a")
        registry.register(tool)
        assert registry.get("a") is tool
        assert "a" in registry
        assert len(registry) == 1

    def test_get_unknown(self) -> None:
        assert ToolRegistry().get("missing") is None

    def test_list_preserves_order(self) -> None:
        registry = ToolRegistry([_tool("b"), _tool("a"), _tool("c")])
        assert [t.name for t in registry.list()] == ["b", "a", "c"]
        assert [t.name for t in registry] == ["b", "a", "c"]

    def test_duplicate_name_rejected(self) -> None:
        registry = ToolRegistry([_tool("a")])
        with pytest.raises(ToolRegistrationError, match="already registered: a"):
            registry.register(_tool("a"))
        assert len(registry) == 1

    def test_definition(self) -> None:
        definition = _tool("a").definition()
        assert definition.name == "a"
        assert definition.description == "a tool"
        assert definition.input_schema == {"type": "object"}
