"""MCPServer — JSON-RPC method handling for one MCP server definition.

The server is transport-agnostic: the stdio loop and every HTTP session
feed it decoded JSON-RPC messages through :meth:`MCPServer.handle_message`
and write back whatever it returns.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from gmp_mcp.protocol.dispatcher import ToolDispatcher
from gmp_mcp.protocol.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    LATEST_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    SUPPORTED_PROTOCOL_VERSIONS,
    JsonRpcRequest,
    JsonRpcResponse,
    ReadResourceResult,
    ResourceDef,
    ToolCallRequest,
    ToolDef,
)
from gmp_mcp.protocol.registry import ToolRegistry
from gmp_mcp.protocol.sink import ToolLogger

logger = logging.getLogger(__name__)

INVALID_RESOURCE_TEXT = "Invalid Resource URI"

ResourceReader = Callable[[str, ToolLogger], Awaitable[str]]
Cleanup = Callable[[], Awaitable[None]]
_MethodHandler = Callable[[dict[str, Any], ToolLogger], Awaitable[dict[str, Any]]]


class MCPServer:
    """Answers ``initialize``, ``tools/*``, ``resources/*`` and ``logging/setLevel``.

    Usage::

        server = MCPServer("my-server", "0.0.1", registry)
        response = await server.handle_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    """

    def __init__(
        self,
        name: str,
        version: str,
        registry: ToolRegistry,
        *,
        resources: list[ResourceDef] | None = None,
        resource_reader: ResourceReader | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self._dispatcher = ToolDispatcher(registry)
        self._resources = list(resources or [])
        self._resource_reader = resource_reader
        self._logger = ToolLogger(name)
        self._cleanups: list[Cleanup] = []
        self._methods: dict[str, _MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
            "logging/setLevel": self._set_level,
        }

    @property
    def logger(self) -> ToolLogger:
        """The default sink; transports ``bind`` their own notifier onto it."""
        return self._logger

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    def list_tools(self) -> list[ToolDef]:
        return [tool.definition() for tool in self._dispatcher.registry.list()]

    def add_cleanup(self, cleanup: Cleanup) -> None:
        """Register a coroutine function to run on :meth:`aclose`."""
        self._cleanups.append(cleanup)

    async def aclose(self) -> None:
        """Release upstream resources; each cleanup runs even if another fails."""
        for cleanup in self._cleanups:
            try:
                await cleanup()
            except Exception:
                logger.exception("Cleanup failed for server %s", self.name)

    # -- message handling ---------------------------------------------------

    async def handle_message(self, message: Any, log: ToolLogger | None = None) -> Any:
        """Process a single message or a batch.

        Returns the wire response (dict or list), or ``None`` when nothing
        needs to be sent back (notifications only).
        """
        sink = log or self._logger
        if isinstance(message, list):
            if not message:
                return JsonRpcResponse.failure(None, INVALID_REQUEST, "Invalid Request").to_wire()
            responses = []
            for item in message:
                response = await self._handle_single(item, sink)
                if response is not None:
                    responses.append(response)
            return responses or None
        return await self._handle_single(message, sink)

    async def _handle_single(self, message: Any, log: ToolLogger) -> dict[str, Any] | None:
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValueError as exc:
            request_id = message.get("id") if isinstance(message, dict) else None
            return JsonRpcResponse.failure(request_id, INVALID_REQUEST, "Invalid Request", str(exc)).to_wire()

        if request.is_notification:
            logger.debug("Notification received: %s", request.method)
            return None

        handler = self._methods.get(request.method)
        if handler is None:
            return JsonRpcResponse.failure(
                request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
            ).to_wire()

        try:
            result = await handler(request.params, log)
        except ValueError as exc:
            return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "Invalid params", str(exc)).to_wire()
        except Exception:
            logger.exception("Error handling %s", request.method)
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error").to_wire()
        return JsonRpcResponse(id=request.id, result=result).to_wire()

    # -- methods ------------------------------------------------------------

    async def _initialize(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        return {
            "protocolVersion": version,
            "capabilities": {"tools": {}, "logging": {}, "resources": {}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    async def _ping(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        return {}

    async def _list_tools(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        return {"tools": [tool.model_dump(by_alias=True) for tool in self.list_tools()]}

    async def _call_tool(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        request = ToolCallRequest.model_validate(params)
        response = await self._dispatcher.dispatch(request, log)
        return response.model_dump()

    async def _list_resources(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        return {"resources": [res.model_dump(by_alias=True) for res in self._resources]}

    async def _read_resource(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str):
            msg = "resources/read requires a string 'uri'"
            raise ValueError(msg)
        if self._resource_reader is None:
            text = INVALID_RESOURCE_TEXT
        else:
            text = await self._resource_reader(uri, log)
        return ReadResourceResult.from_text(uri, text).model_dump(by_alias=True)

    async def _set_level(self, params: dict[str, Any], log: ToolLogger) -> dict[str, Any]:
        log.set_level(str(params.get("level", "")))
        return {}
