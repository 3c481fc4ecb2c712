"""Tests for the places text search tool."""

from __future__ import annotations

from gmp_mcp.config import ServerSettings
from gmp_mcp.protocol.models import ToolCallRequest
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.places import TOOL_NAME, PlacesSearchTextArguments, places_search_text_tool
from gmp_mcp.upstream.client import MapsPlatformClient
from tests.helpers import envelope, json_handler, mock_http

_BIAS = {"circle": {"center": {"latitude": 34.05, "longitude": -118.24}, "radius_meters": 5000}}


class TestPlacesArguments:
    def test_camel_case_body(self) -> None:
        args = PlacesSearchTextArguments(
            text_query="tacos", language_code="es", region_code="MX", location_bias=_BIAS
        )
        assert args.to_body() == {
            "textQuery": "tacos",
            "languageCode": "es",
            "regionCode": "MX",
            "locationBias": _BIAS,
        }

    def test_omits_absent_fields(self) -> None:
        assert PlacesSearchTextArguments(text_query="SF MoMA").to_body() == {"textQuery": "SF MoMA"}

    def test_omits_empty_strings(self) -> None:
        args = PlacesSearchTextArguments(text_query="cafe", language_code="", region_code="")
        assert args.to_body() == {"textQuery": "cafe"}


class TestPlacesHandler:
    async def test_success(self, settings: ServerSettings, log: ToolLogger) -> None:
        places = {"places": [{"id": "abc"}]}
        http, transport = mock_http(json_handler(places))
        tool = places_search_text_tool(MapsPlatformClient(settings, http))

        request = ToolCallRequest(name=TOOL_NAME, arguments={"text_query": "pizza in New York", "location_bias": _BIAS})
        response = await tool.handler(request, log)

        assert envelope(response.text) == {"response": {"contexts": places}, "status": "200"}
        assert transport.last.url.path.endswith("places:searchText")
        assert transport.last_json() == {"textQuery": "pizza in New York", "locationBias": _BIAS}

    async def test_structured_error(self, settings: ServerSettings, log: ToolLogger) -> None:
        http, _ = mock_http(json_handler({"error": {"message": "API key not valid"}}, 403))
        tool = places_search_text_tool(MapsPlatformClient(settings, http))

        response = await tool.handler(ToolCallRequest(name=TOOL_NAME, arguments={"text_query": "x"}), log)

        assert response.text == "API key not valid"

    async def test_missing_query(self, settings: ServerSettings, log: ToolLogger) -> None:
        http, transport = mock_http(json_handler({}))
        tool = places_search_text_tool(MapsPlatformClient(settings, http))

        response = await tool.handler(ToolCallRequest(name=TOOL_NAME, arguments={}), log)

        assert envelope(response.text)["name"] == "ValidationError"
        assert transport.requests == []
