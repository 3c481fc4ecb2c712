"""MCP models — JSON-RPC 2.0 messages, tool and resource payloads.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``), execution (``tools/call``) and resource
reads (``resources/read``), from the server's side of the wire.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

LATEST_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 error codes
# ---------------------------------------------------------------------------

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
BAD_SESSION = -32000

BAD_SESSION_MESSAGE = "Bad Request: No valid session ID provided for non-init request"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification (``id`` is ``None``)."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    id: int | str | None = None
    params: dict[str, Any] = {}

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def failure(
        cls, request_id: int | str | None, code: int, message: str, data: Any = None
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with exactly one of ``result``/``error`` and an explicit ``id``."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


def is_initialize_request(message: Any) -> bool:
    """Return ``True`` if *message* (or any member of a batch) is ``initialize``."""
    if isinstance(message, list):
        return any(is_initialize_request(item) for item in message)
    return isinstance(message, dict) and message.get("method") == "initialize"


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """A single text item inside a tool response."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """The envelope returned for every tool call."""

    content: list[TextContent] = []

    @classmethod
    def from_text(cls, text: str) -> ToolResponse:
        """Create a ToolResponse carrying exactly one text item."""
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return self.content[0].text if self.content else ""


class ToolCallRequest(BaseModel):
    """Parameters of a ``tools/call`` request."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def _null_arguments(cls, value: Any) -> Any:
        return {} if value is None else value


class ToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ResourceDef(BaseModel):
    """A resource advertised by ``resources/list``."""

    model_config = {"populate_by_name": True}

    uri: str
    name: str
    description: str = ""
    mime_type: str = Field(default="text/plain", alias="mimeType")


class ResourceContents(BaseModel):
    """A single item in a ``resources/read`` result."""

    model_config = {"populate_by_name": True}

    uri: str
    mime_type: str = Field(default="text/plain", alias="mimeType")
    text: str


class ReadResourceResult(BaseModel):
    """The result of ``resources/read``."""

    contents: list[ResourceContents] = []

    @classmethod
    def from_text(cls, uri: str, text: str) -> ReadResourceResult:
        return cls(contents=[ResourceContents(uri=uri, text=text)])
