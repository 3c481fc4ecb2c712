"""The code assist server: documentation retrieval plus usage instructions."""

from __future__ import annotations

import httpx

from gmp_mcp.config import ServerSettings
from gmp_mcp.protocol.models import ResourceDef
from gmp_mcp.protocol.registry import ToolRegistry
from gmp_mcp.protocol.server import INVALID_RESOURCE_TEXT, MCPServer
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.docs import retrieve_docs_tool
from gmp_mcp.tools.instructions import (
    InstructionsCache,
    InstructionsProvider,
    instructions_uri,
    retrieve_instructions_tool,
)
from gmp_mcp.upstream.client import DocsClient

SERVER_NAME = "google-maps-platform-code-assist"
SERVER_VERSION = "0.0.1"

INSTRUCTIONS_URI = instructions_uri(SERVER_NAME)

INSTRUCTIONS_RESOURCE = ResourceDef(
    uri=INSTRUCTIONS_URI,
    name="instructions",
    description=(
        "Instructions on how to use the Google Maps Platform Code Assist server: "
        "system instructions, preamble and terms disclaimer."
    ),
)


def build_code_assist_server(
    settings: ServerSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    cache: InstructionsCache | None = None,
) -> MCPServer:
    """Create the code assist server.

    Pass *cache* to share (or pre-seed) the instructions between servers;
    by default each server gets an empty cache of its own.
    """
    settings = settings or ServerSettings.from_env()
    docs = DocsClient(settings, client)
    provider = InstructionsProvider(docs, cache)

    async def read_resource(uri: str, log: ToolLogger) -> str:
        if uri != INSTRUCTIONS_URI:
            await log.info(f"Invalid resource requested: {uri}")
            return INVALID_RESOURCE_TEXT
        return await provider.text(log)

    registry = ToolRegistry(
        [
            retrieve_instructions_tool(provider),
            retrieve_docs_tool(docs, settings),
        ]
    )
    server = MCPServer(
        SERVER_NAME,
        SERVER_VERSION,
        registry,
        resources=[INSTRUCTIONS_RESOURCE],
        resource_reader=read_resource,
    )
    server.add_cleanup(docs.aclose)
    return server
