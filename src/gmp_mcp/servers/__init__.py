"""Server definitions: which tools and resources each MCP server exposes."""

from gmp_mcp.servers.code_assist import build_code_assist_server
from gmp_mcp.servers.maps import build_maps_server

__all__ = ["build_code_assist_server", "build_maps_server"]
