"""Usage instructions for the code assist server — fetch, memoize, serve.

The instructions (system instructions, preamble and the EEA terms
disclaimer) are fetched once from the docs service and kept in an
:class:`InstructionsCache` owned by whoever builds the server. Failed
fetches are not cached; the next access tries again.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

import httpx
from pydantic import BaseModel, Field

from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.upstream.client import DocsClient

logger = logging.getLogger(__name__)

TOOL_NAME = "retrieve-instructions"

DESCRIPTION = (
    "Retrieves the system instructions, preamble and regional terms disclaimer to follow "
    "when helping with Google Maps Platform development. Call this before answering any "
    "Google Maps Platform question."
)

INPUT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}

UNAVAILABLE_TEXT = "Instructions are currently unavailable. Please try again later."


def instructions_uri(app_name: str) -> str:
    return f"mcp://{app_name}/instructions"


class UsageInstructions(BaseModel):
    model_config = {"populate_by_name": True}

    system_instructions: str = Field(default="", alias="systemInstructions")
    preamble: str = ""
    disclaimer: str = Field(default="", alias="europeanEconomicAreaTermsDisclaimer")

    def parts(self) -> list[str]:
        return [self.system_instructions, self.preamble, self.disclaimer]

    def as_text(self) -> str:
        return "\n\n".join(self.parts())


class InstructionsCache:
    """Holds at most one :class:`UsageInstructions` value."""

    def __init__(self) -> None:
        self._value: UsageInstructions | None = None

    def get(self) -> UsageInstructions | None:
        return self._value

    def set(self, value: UsageInstructions | None) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class InstructionsProvider:
    """Serves instructions from the cache, fetching them on first use."""

    def __init__(self, client: DocsClient, cache: InstructionsCache | None = None) -> None:
        self._client = client
        self._cache = cache if cache is not None else InstructionsCache()

    @property
    def cache(self) -> InstructionsCache:
        return self._cache

    async def get(self, log: ToolLogger | None = None) -> UsageInstructions | None:
        """Return the instructions, or ``None`` if they cannot be fetched right now."""
        cached = self._cache.get()
        if cached is not None:
            return cached
        try:
            response = await self._client.instructions()
            instructions = UsageInstructions.model_validate(response.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("Could not fetch usage instructions: %s", exc)
            if log is not None:
                await log.error(f"Error fetching usage instructions: {exc}")
            return None
        self._cache.set(instructions)
        return instructions

    async def text(self, log: ToolLogger | None = None) -> str:
        instructions = await self.get(log)
        return instructions.as_text() if instructions is not None else UNAVAILABLE_TEXT


async def handle_retrieve_instructions(
    request: ToolCallRequest, log: ToolLogger, *, provider: InstructionsProvider
) -> ToolResponse:
    await log.info(f"Calling tool {request.name}")
    return ToolResponse.from_text(await provider.text(log))


def retrieve_instructions_tool(provider: InstructionsProvider) -> ToolDescriptor:
    return ToolDescriptor(
        name=TOOL_NAME,
        description=DESCRIPTION,
        input_schema=INPUT_SCHEMA,
        handler=partial(handle_retrieve_instructions, provider=provider),
    )
