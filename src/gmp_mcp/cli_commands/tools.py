"""``gmp-mcp tools`` — list the tools a server exposes."""

from __future__ import annotations

import click

from gmp_mcp.cli_commands._output import console, print_tools_table
from gmp_mcp.config import ServerSettings


@click.command()
@click.argument("server", type=click.Choice(["maps", "code-assist"]))
def tools(server: str) -> None:
    """Show the tools registered on SERVER without starting it."""
    from gmp_mcp.servers import build_code_assist_server, build_maps_server

    settings = ServerSettings.from_env()
    mcp_server = build_maps_server(settings) if server == "maps" else build_code_assist_server(settings)

    definitions = mcp_server.list_tools()
    if not definitions:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(definitions, title=f"{mcp_server.name} {mcp_server.version}")
