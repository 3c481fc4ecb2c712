"""ToolLogger — the logging sink handed to every tool handler.

Records always go to the stdlib :mod:`logging` tree. When the transport can
push messages to the client (stdio), they are also forwarded as MCP
``notifications/message``. Delivery problems are logged locally and never
reach the handler.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

MCP_LOG_LEVELS = (
    "debug",
    "info",
    "notice",
    "warning",
    "error",
    "critical",
    "alert",
    "emergency",
)

_STDLIB_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "emergency": logging.CRITICAL,
}

Notifier = Callable[[dict[str, Any]], Awaitable[None]]


class ToolLogger:
    """Fan-out logger: stdlib logging plus optional MCP log notifications."""

    def __init__(
        self,
        name: str,
        *,
        notifier: Notifier | None = None,
        level: str = "info",
    ) -> None:
        self._logger = logging.getLogger(name)
        self._name = name
        self._notifier = notifier
        self._level = "info"
        self.set_level(level)

    @property
    def level(self) -> str:
        return self._level

    def set_level(self, level: str) -> None:
        """Set the minimum level forwarded to the client."""
        if level not in MCP_LOG_LEVELS:
            msg = f"Unknown log level: {level}"
            raise ValueError(msg)
        self._level = level

    def bind(self, notifier: Notifier | None) -> ToolLogger:
        """Return a logger sharing name and level but with another notifier."""
        return ToolLogger(self._name, notifier=notifier, level=self._level)

    async def log(self, level: str, data: Any) -> None:
        self._logger.log(_STDLIB_LEVELS.get(level, logging.INFO), "%s", data)
        if self._notifier is None:
            return
        if MCP_LOG_LEVELS.index(level) < MCP_LOG_LEVELS.index(self._level):
            return
        notification = {
            "jsonrpc": "2.0",
            "method": "notifications/message",
            "params": {"level": level, "logger": self._name, "data": data},
        }
        try:
            await self._notifier(notification)
        except Exception:
            logger.warning("Could not deliver log notification", exc_info=True)

    async def info(self, data: Any) -> None:
        await self.log("info", data)

    async def error(self, data: Any) -> None:
        await self.log("error", data)
