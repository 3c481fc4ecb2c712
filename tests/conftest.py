"""Shared fixtures."""

from __future__ import annotations

import pytest

from gmp_mcp.config import ServerSettings
from gmp_mcp.protocol.sink import ToolLogger


@pytest.fixture
def settings() -> ServerSettings:
    return ServerSettings(google_maps_api_key="test-key")


@pytest.fixture
def log() -> ToolLogger:
    return ToolLogger("test")
