"""gmp-mcp CLI entrypoint."""

from __future__ import annotations

import click

from gmp_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="gmp-mcp")
def main() -> None:
    """Google Maps Platform MCP servers."""


# Register subcommands
from gmp_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
