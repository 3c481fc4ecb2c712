"""Google Maps Platform MCP servers — maps tools and code assist over MCP."""

from __future__ import annotations

__version__ = "0.1.0"
