"""The maps tools server: weather, places search and routes."""

from __future__ import annotations

import httpx

from gmp_mcp.config import ServerSettings
from gmp_mcp.protocol.registry import ToolRegistry
from gmp_mcp.protocol.server import MCPServer
from gmp_mcp.tools.places import places_search_text_tool
from gmp_mcp.tools.routes import compute_routes_tool
from gmp_mcp.tools.weather import weather_lookup_tool
from gmp_mcp.upstream.client import MapsPlatformClient

SERVER_NAME = "google-maps-platform-maps-tools"
SERVER_VERSION = "0.0.1"


def build_maps_server(
    settings: ServerSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> MCPServer:
    """Create the maps tools server.

    The API key is not checked here; a missing key surfaces on the first
    tool call (the CLI checks it at startup).
    """
    settings = settings or ServerSettings.from_env()
    maps = MapsPlatformClient(settings, client)
    registry = ToolRegistry(
        [
            weather_lookup_tool(maps),
            places_search_text_tool(maps),
            compute_routes_tool(maps),
        ]
    )
    server = MCPServer(SERVER_NAME, SERVER_VERSION, registry)
    server.add_cleanup(maps.aclose)
    return server
