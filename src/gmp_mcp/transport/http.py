"""Streamable HTTP transport — one FastAPI app, many MCP sessions.

Clients open a session with an ``initialize`` POST and carry the returned
``mcp-session-id`` header on every later request. Responses are plain JSON
(no SSE stream), so server-to-client log notifications are only available
over stdio.
"""

from __future__ import annotations

import errno
import json
import logging
import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from gmp_mcp.errors import SessionError
from gmp_mcp.protocol.models import (
    BAD_SESSION,
    BAD_SESSION_MESSAGE,
    INTERNAL_ERROR,
    PARSE_ERROR,
    JsonRpcResponse,
    is_initialize_request,
)
from gmp_mcp.protocol.server import MCPServer
from gmp_mcp.transport.sessions import SessionHandle, SessionTable

logger = logging.getLogger(__name__)

SESSION_HEADER = "mcp-session-id"
MCP_PATH = "/mcp"


@dataclass
class TransportResult:
    """What the HTTP layer should send back for one MCP request."""

    status_code: int
    body: Any = None
    session_id: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


def bad_session_result() -> TransportResult:
    body = JsonRpcResponse.failure(None, BAD_SESSION, BAD_SESSION_MESSAGE).to_wire()
    return TransportResult(status_code=400, body=body)


def _initialized(message: Any, body: Any) -> bool:
    """Whether the ``initialize`` request in *message* got a ``result`` in *body*."""
    requests = message if isinstance(message, list) else [message]
    init_ids = [
        item["id"]
        for item in requests
        if isinstance(item, dict) and item.get("method") == "initialize" and item.get("id") is not None
    ]
    responses = body if isinstance(body, list) else [body]
    return any(
        isinstance(item, dict) and "result" in item and item.get("id") in init_ids for item in responses
    )


class SessionRouter:
    """Routes MCP messages to session handles and owns the session table."""

    def __init__(self, server: MCPServer, table: SessionTable | None = None) -> None:
        self._server = server
        self._table = table if table is not None else SessionTable()

    @property
    def server(self) -> MCPServer:
        return self._server

    @property
    def table(self) -> SessionTable:
        return self._table

    async def handle_post(self, session_id: str | None, message: Any) -> TransportResult:
        if session_id:
            handle = self._table.get(session_id)
            if handle is None:
                logger.info("Rejected request for unknown session %s", session_id)
                return bad_session_result()
            try:
                body = await handle.handle(message)
            except SessionError:
                return bad_session_result()
            return self._result(body, handle.session_id)

        if not is_initialize_request(message):
            return bad_session_result()

        handle = SessionHandle(self._server)
        body = await handle.handle(message)
        if not _initialized(message, body):
            await handle.close()
            return self._result(body, None)
        self._table.insert(handle)
        logger.info("Session initialized with ID: %s", handle.session_id)
        return self._result(body, handle.session_id)

    async def handle_delete(self, session_id: str | None) -> TransportResult:
        handle = self._table.get(session_id) if session_id else None
        if handle is None:
            return bad_session_result()
        await handle.close()
        logger.info("Session %s closed by client", handle.session_id)
        return TransportResult(status_code=200, session_id=handle.session_id)

    def health(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "activeSessions": len(self._table),
            "timestamp": datetime.now(UTC).isoformat(),
        }

    async def shutdown(self) -> None:
        """Close every open session."""
        logger.info("Closing %d session(s)", len(self._table))
        await self._table.close_all()

    @staticmethod
    def _result(body: Any, session_id: str | None) -> TransportResult:
        return TransportResult(
            status_code=200 if body is not None else 202,
            body=body,
            session_id=session_id,
        )


def _to_response(result: TransportResult) -> Response:
    headers = dict(result.headers)
    if result.session_id:
        headers[SESSION_HEADER] = result.session_id
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    return JSONResponse(result.body, status_code=result.status_code, headers=headers)


def create_app(server: MCPServer, *, router: SessionRouter | None = None) -> FastAPI:
    """Build the FastAPI application serving *server* on ``/mcp``."""
    session_router = router if router is not None else SessionRouter(server)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await session_router.shutdown()
        await server.aclose()

    app = FastAPI(title=server.name, version=server.version, lifespan=lifespan)
    app.state.router = session_router

    @app.post(MCP_PATH)
    async def post_mcp(request: Request) -> Response:
        try:
            message = json.loads(await request.body())
        except ValueError as exc:
            body = JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc)).to_wire()
            return JSONResponse(body, status_code=400)
        try:
            result = await session_router.handle_post(request.headers.get(SESSION_HEADER), message)
        except Exception:
            logger.exception("Error handling MCP request")
            body = JsonRpcResponse.failure(None, INTERNAL_ERROR, "Internal server error").to_wire()
            return JSONResponse(body, status_code=500)
        return _to_response(result)

    @app.delete(MCP_PATH)
    async def delete_mcp(request: Request) -> Response:
        result = await session_router.handle_delete(request.headers.get(SESSION_HEADER))
        return _to_response(result)

    @app.get(MCP_PATH)
    async def get_mcp() -> Response:
        body = JsonRpcResponse.failure(None, BAD_SESSION, "Method not allowed.").to_wire()
        return JSONResponse(body, status_code=405, headers={"Allow": "POST, DELETE"})

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return session_router.health()

    return app


# ---------------------------------------------------------------------------
# Serving
# ---------------------------------------------------------------------------


def _new_socket(host: str) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    return socket.socket(family, socket.SOCK_STREAM)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on *port*, or on an ephemeral port if it is taken."""
    sock = _new_socket(host)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        if exc.errno != errno.EADDRINUSE:
            raise
        logger.warning("Port %d is in use, binding an ephemeral port instead", port)
        sock = _new_socket(host)
        sock.bind((host, 0))
    sock.listen()
    return sock


def bound_port(sock: socket.socket) -> int:
    return int(sock.getsockname()[1])


async def serve_http(app: FastAPI, host: str, port: int) -> None:
    """Serve *app* with uvicorn until interrupted."""
    sock = bind_socket(host, port)
    logger.info("MCP server listening on http://%s:%d%s", host, bound_port(sock), MCP_PATH)
    config = uvicorn.Config(app, log_config=None, lifespan="on")
    try:
        await uvicorn.Server(config).serve(sockets=[sock])
    finally:
        sock.close()
