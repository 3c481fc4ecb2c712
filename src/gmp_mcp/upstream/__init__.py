"""Upstream service clients."""

from gmp_mcp.upstream.client import DocsClient, MapsPlatformClient

__all__ = ["DocsClient", "MapsPlatformClient"]
