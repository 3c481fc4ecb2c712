"""Shared CLI output formatters and logging setup."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gmp_mcp.protocol.models import ToolDef  # noqa: TC001

console = Console()
# stdout belongs to the stdio transport once a server is running.
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Send all log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def print_tools_table(tools: list[ToolDef], *, title: str = "Tools") -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required")

    for tool in tools:
        required = ", ".join(tool.input_schema.get("required", [])) or "-"
        table.add_row(tool.name, _truncate(_first_line(tool.description)), required)

    console.print(table)


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
