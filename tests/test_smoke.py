"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import gmp_mcp

    assert gmp_mcp.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from gmp_mcp.cli import main

    assert callable(main)


def test_public_imports() -> None:
    from gmp_mcp.protocol import MCPServer, ToolDispatcher, ToolLogger, ToolRegistry
    from gmp_mcp.servers import build_code_assist_server, build_maps_server
    from gmp_mcp.transport import SessionRouter, SessionTable, StdioServerTransport, create_app
    from gmp_mcp.upstream import DocsClient, MapsPlatformClient

    assert MCPServer is not None
    assert ToolDispatcher is not None
    assert ToolLogger is not None
    assert ToolRegistry is not None
    assert build_maps_server is not None
    assert build_code_assist_server is not None
    assert SessionRouter is not None
    assert SessionTable is not None
    assert StdioServerTransport is not None
    assert create_app is not None
    assert DocsClient is not None
    assert MapsPlatformClient is not None
