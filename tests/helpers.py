"""Shared helpers: recording HTTP transports and a capturing notifier."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """``httpx.MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def json_handler(body: Any, status_code: int = 200) -> Handler:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return _handler


def raising_handler(exc: Exception) -> Handler:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return _handler


def mock_http(handler: Handler) -> tuple[httpx.AsyncClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    return httpx.AsyncClient(transport=transport), transport


class CapturingNotifier:
    """Async callable collecting every notification it is handed."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


def envelope(text: str) -> Any:
    """Decode the JSON text of a tool response."""
    return json.loads(text)
