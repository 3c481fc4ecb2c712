"""``gmp-mcp maps`` / ``gmp-mcp code-assist`` — run an MCP server."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from typing import Any

import click

from gmp_mcp.cli_commands._output import configure_logging, err_console
from gmp_mcp.config import ServerSettings
from gmp_mcp.errors import ConfigurationError
from gmp_mcp.protocol.server import MCPServer

ServerFactory = Callable[[ServerSettings], MCPServer]


def _server_options(default_transport: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        options = [
            click.option(
                "--transport",
                type=click.Choice(["stdio", "http"]),
                default=default_transport,
                show_default=True,
                help="How clients reach the server.",
            ),
            click.option("--host", default="127.0.0.1", show_default=True, help="HTTP bind address."),
            click.option(
                "--port",
                type=int,
                default=3000,
                envvar="PORT",
                show_default=True,
                help="Preferred HTTP port; an ephemeral port is used if it is taken.",
            ),
            click.option("--verbose", "-v", is_flag=True, help="Enable debug logging."),
            click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing."),
            click.option(
                "--otlp-endpoint",
                default=None,
                envvar="OTEL_EXPORTER_OTLP_ENDPOINT",
                help="Export spans to this OTLP/gRPC endpoint (with --telemetry).",
            ),
        ]
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


async def _serve(server: MCPServer, transport: str, host: str, port: int) -> None:
    if transport == "stdio":
        from gmp_mcp.transport.stdio import StdioServerTransport

        try:
            await StdioServerTransport(server).run()
        finally:
            await server.aclose()
        return

    from gmp_mcp.transport.http import create_app, serve_http

    # The app's lifespan closes the sessions and the server.
    await serve_http(create_app(server), host, port)


def _run(
    factory: ServerFactory,
    settings: ServerSettings,
    *,
    transport: str,
    host: str,
    port: int,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    if telemetry:
        from gmp_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=not otlp_endpoint, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    server = factory(settings)
    try:
        asyncio.run(_serve(server, transport, host, port))
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        err_console.print(f"[red]Server error:[/red] {exc}")
        sys.exit(1)


@click.command()
@_server_options(default_transport="stdio")
def maps(
    transport: str,
    host: str,
    port: int,
    verbose: bool,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Run the maps tools server (weather, places, routes).

    Requires the GOOGLE_MAPS_API_KEY environment variable.
    """
    from gmp_mcp.servers.maps import build_maps_server

    configure_logging(verbose)
    settings = ServerSettings.from_env()
    try:
        settings.require_api_key()
    except ConfigurationError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    _run(
        build_maps_server,
        settings,
        transport=transport,
        host=host,
        port=port,
        telemetry=telemetry,
        otlp_endpoint=otlp_endpoint,
    )


@click.command("code-assist")
@_server_options(default_transport="http")
def code_assist(
    transport: str,
    host: str,
    port: int,
    verbose: bool,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Run the code assist server (docs retrieval and instructions)."""
    from gmp_mcp.servers.code_assist import build_code_assist_server

    configure_logging(verbose)
    _run(
        build_code_assist_server,
        ServerSettings.from_env(),
        transport=transport,
        host=host,
        port=port,
        telemetry=telemetry,
        otlp_endpoint=otlp_endpoint,
    )
