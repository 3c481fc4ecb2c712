"""Stdio transport — newline-delimited JSON-RPC on stdin/stdout.

stdout carries protocol messages only; logging goes to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, TextIO

from gmp_mcp.protocol.models import PARSE_ERROR, JsonRpcResponse
from gmp_mcp.protocol.server import MCPServer

logger = logging.getLogger(__name__)

_READ_LIMIT = 16 * 1024 * 1024


class StdioServerTransport:
    """Serves one client over a pair of streams.

    Log records emitted by tool handlers are pushed to the client as
    ``notifications/message`` on the same stream as responses.
    """

    def __init__(
        self,
        server: MCPServer,
        *,
        reader: asyncio.StreamReader | None = None,
        writer: TextIO | None = None,
    ) -> None:
        self._server = server
        self._reader = reader
        self._writer = writer if writer is not None else sys.stdout
        self._write_lock = asyncio.Lock()
        self._log = server.logger.bind(self._send)

    async def _open_stdin(self) -> asyncio.StreamReader:
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(limit=_READ_LIMIT)
        await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
        return reader

    async def _send(self, message: Any) -> None:
        async with self._write_lock:
            self._writer.write(json.dumps(message) + "\n")
            self._writer.flush()

    async def handle_line(self, line: str) -> None:
        """Decode and answer one input line."""
        try:
            message = json.loads(line)
        except ValueError as exc:
            await self._send(JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc)).to_wire())
            return
        response = await self._server.handle_message(message, self._log)
        if response is not None:
            await self._send(response)

    async def run(self) -> None:
        """Read requests until stdin closes."""
        reader = self._reader if self._reader is not None else await self._open_stdin()
        logger.info("%s running on stdio", self._server.name)
        while True:
            try:
                raw = await reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as exc:
                raw = exc.partial
            except asyncio.LimitOverrunError:
                await _discard_line(reader)
                logger.warning("Dropped an input line over the stream limit")
                await self._send(
                    JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", "Message too large").to_wire()
                )
                continue
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").strip()
            if line:
                await self.handle_line(line)
        logger.info("stdin closed, stopping %s", self._server.name)


async def _discard_line(reader: asyncio.StreamReader) -> None:
    """Drop input up to and including the next newline (or EOF)."""
    while True:
        try:
            await reader.readuntil(b"\n")
            return
        except asyncio.LimitOverrunError as exc:
            await reader.readexactly(exc.consumed)
        except asyncio.IncompleteReadError:
            return
