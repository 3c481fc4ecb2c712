"""Tests for MCPServer message handling."""

from __future__ import annotations

from unittest.mock import AsyncMock

from gmp_mcp.protocol.models import LATEST_PROTOCOL_VERSION, ResourceDef, ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor, ToolRegistry
from gmp_mcp.protocol.server import INVALID_RESOURCE_TEXT, MCPServer
from gmp_mcp.protocol.sink import ToolLogger


async def _echo(request: ToolCallRequest, log: ToolLogger) -> ToolResponse:
    return ToolResponse.from_text(f"echo:{request.arguments.get('value', '')}")


def _server(**kwargs: object) -> MCPServer:
    registry = ToolRegistry(
        [ToolDescriptor(name="echo", description="Echo", input_schema={"type": "object"}, handler=_echo)]
    )
    return MCPServer("test-server", "0.0.1", registry, **kwargs)  # type: ignore[arg-type]


def _request(method: str, params: dict | None = None, request_id: int = 1) -> dict:
    message: dict = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


class TestInitialize:
    async def test_echoes_supported_version(self) -> None:
        response = await _server().handle_message(
            _request("initialize", {"protocolVersion": "2024-11-05", "capabilities": {}})
        )
        result = response["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"] == {"name": "test-server", "version": "0.0.1"}
        assert set(result["capabilities"]) == {"tools", "logging", "resources"}

    async def test_unknown_version_gets_latest(self) -> None:
        response = await _server().handle_message(_request("initialize", {"protocolVersion": "1999-01-01"}))
        assert response["result"]["protocolVersion"] == LATEST_PROTOCOL_VERSION


class TestMethods:
    async def test_ping(self) -> None:
        assert await _server().handle_message(_request("ping", request_id=7)) == {
            "jsonrpc": "2.0",
            "id": 7,
            "result": {},
        }

    async def test_tools_list(self) -> None:
        response = await _server().handle_message(_request("tools/list"))
        assert response["result"]["tools"] == [
            {"name": "echo", "description": "Echo", "inputSchema": {"type": "object"}}
        ]

    async def test_tools_call(self) -> None:
        response = await _server().handle_message(
            _request("tools/call", {"name": "echo", "arguments": {"value": "hi"}})
        )
        assert response["result"] == {"content": [{"type": "text", "text": "echo:hi"}]}

    async def test_tools_call_unknown_tool(self) -> None:
        response = await _server().handle_message(_request("tools/call", {"name": "missing"}))
        assert response["result"]["content"][0]["text"] == "Invalid Tool called"

    async def test_tools_call_null_arguments(self) -> None:
        server = _server()

        echoed = await server.handle_message(_request("tools/call", {"name": "echo", "arguments": None}))
        unknown = await server.handle_message(_request("tools/call", {"name": "nope", "arguments": None}))

        assert echoed["result"]["content"][0]["text"] == "echo:"
        assert unknown["result"]["content"][0]["text"] == "Invalid Tool called"

    async def test_tools_call_without_name(self) -> None:
        response = await _server().handle_message(_request("tools/call", {"arguments": {}}))
        assert response["error"]["code"] == -32602

    async def test_unknown_method(self) -> None:
        response = await _server().handle_message(_request("prompts/list"))
        assert response["error"] == {"code": -32601, "message": "Method not found: prompts/list"}

    async def test_invalid_request(self) -> None:
        response = await _server().handle_message({"jsonrpc": "2.0", "id": 4})
        assert response["id"] == 4
        assert response["error"]["code"] == -32600

    async def test_notification_has_no_response(self) -> None:
        message = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        assert await _server().handle_message(message) is None


class TestBatches:
    async def test_batch_responses(self) -> None:
        batch = [
            _request("ping", request_id=1),
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            _request("tools/list", request_id=2),
        ]
        responses = await _server().handle_message(batch)
        assert [r["id"] for r in responses] == [1, 2]

    async def test_notification_only_batch(self) -> None:
        batch = [{"jsonrpc": "2.0", "method": "notifications/initialized"}]
        assert await _server().handle_message(batch) is None

    async def test_empty_batch(self) -> None:
        response = await _server().handle_message([])
        assert response["error"]["code"] == -32600


class TestResources:
    async def test_list(self) -> None:
        resource = ResourceDef(uri="mcp://test/instructions", name="instructions")
        response = await _server(resources=[resource]).handle_message(_request("resources/list"))
        assert response["result"]["resources"][0]["uri"] == "mcp://test/instructions"
        assert response["result"]["resources"][0]["mimeType"] == "text/plain"

    async def test_read_uses_reader(self) -> None:
        reader = AsyncMock(return_value="the text")
        server = _server(resource_reader=reader)

        response = await server.handle_message(_request("resources/read", {"uri": "mcp://test/x"}))

        assert response["result"]["contents"] == [
            {"uri": "mcp://test/x", "mimeType": "text/plain", "text": "the text"}
        ]
        assert reader.await_args.args[0] == "mcp://test/x"

    async def test_read_without_reader(self) -> None:
        response = await _server().handle_message(_request("resources/read", {"uri": "mcp://test/x"}))
        assert response["result"]["contents"][0]["text"] == INVALID_RESOURCE_TEXT

    async def test_read_requires_uri(self) -> None:
        response = await _server().handle_message(_request("resources/read", {}))
        assert response["error"]["code"] == -32602

    async def test_reader_crash_is_internal_error(self) -> None:
        reader = AsyncMock(side_effect=RuntimeError("boom"))
        response = await _server(resource_reader=reader).handle_message(
            _request("resources/read", {"uri": "mcp://test/x"})
        )
        assert response["error"] == {"code": -32603, "message": "Internal error"}


class TestLogging:
    async def test_set_level(self) -> None:
        server = _server()
        log = server.logger.bind(None)
        response = await server.handle_message(_request("logging/setLevel", {"level": "error"}), log)
        assert response["result"] == {}
        assert log.level == "error"
        assert server.logger.level == "info"

    async def test_set_unknown_level(self) -> None:
        response = await _server().handle_message(_request("logging/setLevel", {"level": "loud"}))
        assert response["error"]["code"] == -32602


class TestLifecycle:
    def test_list_tools(self) -> None:
        assert [t.name for t in _server().list_tools()] == ["echo"]

    async def test_aclose_runs_every_cleanup(self) -> None:
        server = _server()
        failing = AsyncMock(side_effect=RuntimeError("fail"))
        ok = AsyncMock()
        server.add_cleanup(failing)
        server.add_cleanup(ok)

        await server.aclose()

        failing.assert_awaited_once()
        ok.assert_awaited_once()
