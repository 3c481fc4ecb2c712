"""ToolRegistry — name-to-descriptor map populated once at startup."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from gmp_mcp.errors import ToolRegistrationError
from gmp_mcp.protocol.models import ToolCallRequest, ToolDef, ToolResponse
from gmp_mcp.protocol.sink import ToolLogger

ToolHandler = Callable[[ToolCallRequest, ToolLogger], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described tool and the coroutine that serves it."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler = field(compare=False)

    def definition(self) -> ToolDef:
        """The public ``tools/list`` entry for this tool."""
        return ToolDef(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )


class ToolRegistry:
    """Holds tool descriptors keyed by unique name.

    Usage::

        registry = ToolRegistry()
        registry.register(weather_tool)
        registry.get("GoogleMapsPlatformWeatherLookup")
    """

    def __init__(self, tools: list[ToolDescriptor] | None = None) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDescriptor) -> None:
        """Add *tool*; names must be unique within the registry."""
        if tool.name in self._tools:
            raise ToolRegistrationError(tool.name)
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def list(self) -> list[ToolDescriptor]:
        """Return descriptors in registration order."""
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
