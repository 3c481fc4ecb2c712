"""Tests for the JSON-RPC and MCP payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gmp_mcp.protocol.models import (
    BAD_SESSION,
    BAD_SESSION_MESSAGE,
    JsonRpcRequest,
    JsonRpcResponse,
    ReadResourceResult,
    ResourceDef,
    ToolCallRequest,
    ToolDef,
    ToolResponse,
    is_initialize_request,
)


class TestJsonRpcRequest:
    def test_request(self) -> None:
        req = JsonRpcRequest.model_validate({"jsonrpc": "2.0", "id": 1, "method": "ping"})
        assert req.id == 1
        assert req.params == {}
        assert not req.is_notification

    def test_notification(self) -> None:
        req = JsonRpcRequest.model_validate({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert req.is_notification

    def test_rejects_wrong_version(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"jsonrpc": "1.0", "id": 1, "method": "ping"})


class TestJsonRpcResponse:
    def test_result_defaults_to_empty_object(self) -> None:
        assert JsonRpcResponse(id=3).to_wire() == {"jsonrpc": "2.0", "id": 3, "result": {}}

    def test_failure_omits_empty_data(self) -> None:
        wire = JsonRpcResponse.failure(None, BAD_SESSION, BAD_SESSION_MESSAGE).to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {
                "code": -32000,
                "message": "Bad Request: No valid session ID provided for non-init request",
            },
        }

    def test_failure_keeps_data(self) -> None:
        wire = JsonRpcResponse.failure("a", -32602, "Invalid params", "details").to_wire()
        assert wire["error"]["data"] == "details"
        assert "result" not in wire


class TestIsInitializeRequest:
    def test_single(self) -> None:
        assert is_initialize_request({"method": "initialize"})
        assert not is_initialize_request({"method": "tools/list"})

    def test_batch(self) -> None:
        assert is_initialize_request([{"method": "ping"}, {"method": "initialize"}])
        assert not is_initialize_request([{"method": "ping"}])

    def test_non_message(self) -> None:
        assert not is_initialize_request("initialize")
        assert not is_initialize_request(None)


class TestToolPayloads:
    def test_tool_response_from_text(self) -> None:
        response = ToolResponse.from_text("hello")
        assert response.model_dump() == {"content": [{"type": "text", "text": "hello"}]}
        assert response.text == "hello"

    def test_empty_tool_response_text(self) -> None:
        assert ToolResponse().text == ""

    def test_tool_call_arguments_default(self) -> None:
        assert ToolCallRequest(name="x").arguments == {}

    def test_tool_call_null_arguments(self) -> None:
        assert ToolCallRequest.model_validate({"name": "x", "arguments": None}).arguments == {}

    def test_tool_def_alias(self) -> None:
        tool = ToolDef(name="t", description="d", input_schema={"type": "object"})
        assert tool.model_dump(by_alias=True) == {
            "name": "t",
            "description": "d",
            "inputSchema": {"type": "object"},
        }


class TestResourcePayloads:
    def test_resource_def_alias(self) -> None:
        res = ResourceDef(uri="mcp://x/instructions", name="instructions")
        assert res.model_dump(by_alias=True)["mimeType"] == "text/plain"

    def test_read_resource_result(self) -> None:
        result = ReadResourceResult.from_text("mcp://x/instructions", "body")
        assert result.model_dump(by_alias=True) == {
            "contents": [{"uri": "mcp://x/instructions", "mimeType": "text/plain", "text": "body"}]
        }
