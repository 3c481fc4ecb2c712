"""Upstream HTTP clients — Google Maps Platform tools API and the docs service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from gmp_mcp.config import ServerSettings
from gmp_mcp.utils.telemetry import ATTR_HTTP_STATUS, ATTR_UPSTREAM_PATH, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class _UpstreamClient:
    """Shared ``httpx.AsyncClient`` lifecycle for both upstream services.

    An externally supplied client is used as-is and never closed here;
    otherwise one is created on ``__aenter__`` and closed on ``__aexit__``.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> _UpstreamClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Issue one request and raise ``httpx.HTTPStatusError`` on non-2xx."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        with _tracer.start_as_current_span("upstream.request") as span:
            span.set_attribute(ATTR_UPSTREAM_PATH, path)
            response = await self._http().request(
                method,
                url,
                params=params,
                json=json,
                headers=JSON_HEADERS,
            )
            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
        response.raise_for_status()
        return response


class MapsPlatformClient(_UpstreamClient):
    """Client for the ``mapstools.googleapis.com`` endpoints.

    Every call carries the API key as the ``key`` query parameter. The key is
    resolved before the request is built, so a missing key raises
    :class:`~gmp_mcp.errors.ConfigurationError` without touching the network.
    """

    def __init__(self, settings: ServerSettings, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(settings.maps_service_url, client)
        self._settings = settings

    async def post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        api_key = self._settings.require_api_key()
        return await self._request("POST", path, params={"key": api_key}, json=body)

    async def weather_lookup(self, body: dict[str, Any]) -> httpx.Response:
        return await self.post("weather:lookup", body)

    async def search_text(self, body: dict[str, Any]) -> httpx.Response:
        return await self.post("places:searchText", body)

    async def compute_routes(self, body: dict[str, Any]) -> httpx.Response:
        return await self.post("routes:compute", body)


class DocsClient(_UpstreamClient):
    """Client for the documentation retrieval (RAG) service."""

    def __init__(self, settings: ServerSettings, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(settings.rag_endpoint, client)
        self._settings = settings

    async def chat(self, body: dict[str, Any]) -> httpx.Response:
        """POST a free-text documentation query to ``/chat``."""
        return await self._request("POST", "chat", json=body)

    async def instructions(self) -> httpx.Response:
        """GET the usage instructions for this deployment's source."""
        return await self._request("GET", "instructions", params={"source": self._settings.source})
