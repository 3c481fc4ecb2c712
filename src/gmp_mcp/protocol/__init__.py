"""MCP protocol layer — JSON-RPC models, tool registry, dispatch, server."""

from gmp_mcp.protocol.dispatcher import INVALID_TOOL_TEXT, ToolDispatcher
from gmp_mcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ResourceDef,
    TextContent,
    ToolCallRequest,
    ToolDef,
    ToolResponse,
)
from gmp_mcp.protocol.registry import ToolDescriptor, ToolRegistry
from gmp_mcp.protocol.server import INVALID_RESOURCE_TEXT, MCPServer
from gmp_mcp.protocol.sink import ToolLogger

__all__ = [
    "INVALID_RESOURCE_TEXT",
    "INVALID_TOOL_TEXT",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPServer",
    "ResourceDef",
    "TextContent",
    "ToolCallRequest",
    "ToolDef",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolLogger",
    "ToolRegistry",
    "ToolResponse",
]
