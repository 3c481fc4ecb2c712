"""MCP server transports — stdio and session-multiplexed HTTP."""

from gmp_mcp.transport.http import (
    SESSION_HEADER,
    SessionRouter,
    TransportResult,
    bind_socket,
    bound_port,
    create_app,
    serve_http,
)
from gmp_mcp.transport.sessions import SessionHandle, SessionState, SessionTable
from gmp_mcp.transport.stdio import StdioServerTransport

__all__ = [
    "SESSION_HEADER",
    "SessionHandle",
    "SessionRouter",
    "SessionState",
    "SessionTable",
    "StdioServerTransport",
    "TransportResult",
    "bind_socket",
    "bound_port",
    "create_app",
    "serve_http",
]
