"""Session handles and the session table for the HTTP transport.

A :class:`SessionHandle` is created for every accepted ``initialize``
request and lives in the :class:`SessionTable` until it is closed, either
by the client (``DELETE /mcp``) or by the shutdown sweep. Requests for the
same session run one at a time; different sessions interleave freely on
the event loop.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import uuid
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from typing import Any

from gmp_mcp.errors import SessionError
from gmp_mcp.protocol.server import MCPServer
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.utils.telemetry import ATTR_SESSION_ID, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class SessionState(enum.Enum):
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


CloseCallback = Callable[["SessionHandle"], None]


class SessionHandle:
    """One client session bound to a shared :class:`MCPServer`.

    Each handle owns its own :class:`ToolLogger`, so ``logging/setLevel``
    in one session does not affect another.
    """

    def __init__(self, server: MCPServer, session_id: str | None = None) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = datetime.now(UTC)
        self._server = server
        self._log = server.logger.bind(None)
        self._lock = asyncio.Lock()
        self._state = SessionState.ACTIVE
        self._close_callbacks: list[CloseCallback] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def log(self) -> ToolLogger:
        return self._log

    def on_close(self, callback: CloseCallback) -> None:
        """Register *callback* to run once the handle reaches ``CLOSED``."""
        self._close_callbacks.append(callback)

    async def handle(self, message: Any) -> Any:
        """Process one JSON-RPC message (or batch) for this session.

        Raises:
            SessionError: If the session is closing or closed.
        """
        if self._state is not SessionState.ACTIVE:
            raise SessionError(self.session_id, "session is closed")
        async with self._lock:
            with _tracer.start_as_current_span("session.handle") as span:
                span.set_attribute(ATTR_SESSION_ID, self.session_id)
                return await self._server.handle_message(message, self._log)

    async def close(self) -> None:
        """Close the handle after any in-flight request finishes.

        Calling ``close`` more than once is a no-op.
        """
        if self._state is not SessionState.ACTIVE:
            return
        self._state = SessionState.CLOSING
        async with self._lock:
            self._state = SessionState.CLOSED
        logger.debug("Session %s closed", self.session_id)
        for callback in self._close_callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("Close callback failed for session %s", self.session_id)


class SessionTable:
    """Mapping of session id to :class:`SessionHandle`.

    Entries are inserted once, on a successful ``initialize``, and removed
    when their handle closes. Only the event loop touches the table.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionHandle] = {}

    def insert(self, handle: SessionHandle) -> None:
        """Add *handle*; its entry is dropped automatically when it closes.

        Raises:
            SessionError: If a handle with the same id is already present.
        """
        if handle.session_id in self._sessions:
            raise SessionError(handle.session_id, "already registered")
        self._sessions[handle.session_id] = handle
        handle.on_close(self._discard)

    def remove(self, session_id: str) -> SessionHandle | None:
        return self._sessions.pop(session_id, None)

    def get(self, session_id: str) -> SessionHandle | None:
        return self._sessions.get(session_id)

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[SessionHandle]:
        return iter(list(self._sessions.values()))

    async def close_all(self) -> None:
        """Close every handle and empty the table.

        A failure on one handle is logged and the sweep moves on.
        """
        for session_id, handle in list(self._sessions.items()):
            try:
                await handle.close()
            except Exception:
                logger.exception("Error closing session %s", session_id)
            finally:
                self.remove(session_id)

    def _discard(self, handle: SessionHandle) -> None:
        if self._sessions.get(handle.session_id) is handle:
            del self._sessions[handle.session_id]
