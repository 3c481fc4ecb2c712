"""GoogleMapsPlatformPlacesSearchText — text search for places."""

from __future__ import annotations

import json
from functools import partial
from typing import Any

from pydantic import BaseModel

from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.base import call_upstream, tool_failure
from gmp_mcp.upstream.client import MapsPlatformClient

TOOL_NAME = "GoogleMapsPlatformPlacesSearchText"

DESCRIPTION = """
**Tool Name:** Places Search Tool
**Core Functionality:** Searches for places based on a text query.
**Input Requirements (CRITICAL):**
* **text_query:** (string) - The primary search term (e.g., 'restaurants in New York', 'coffee shops near Golden Gate Park', 'SF MoMA'). This is the only mandatory parameter.
**Location Bias:**
To bias results to a specific area, use the 'location_bias' parameter. This is defined as a circle with a center point (latitude, longitude) and a radius in meters.
Example: {"location_bias": {"circle": {"center": {"latitude": 34.052235, "longitude": -118.243683}, "radius_meters": 5000}}}
**Location Information:**
Some location information must be available to use this tool. The location information can either be specified in the query (e.g., "pizza in New York") or in the location_bias parameter.
"""

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Schema for searching places based on a text query.",
    "properties": {
        "text_query": {
            "type": "string",
            "description": "The text query to search for places (e.g., 'restaurants in New York').",
        },
        "language_code": {
            "type": "string",
            "description": (
                "language code, indicating in which language the results should be returned, if possible. "
                "Full list can be found at https://developers.google.com/maps/faq#languagesupport."
            ),
        },
        "region_code": {
            "type": "string",
            "description": (
                "region code, indicating the region where results should be biased, if possible. "
                "This is specified as a Unicode country/region code (CLDR) two-character value. "
                "For example, to bias results to the United States, use 'US'."
            ),
        },
        "location_bias": {
            "type": "object",
            "description": (
                "location bias, to prefer results in a specified area. The location bias is an area, "
                "defined as a circle. If radius_meters is not specified, the center point is used as "
                "a point bias."
            ),
            "properties": {
                "circle": {
                    "type": "object",
                    "description": "A circle defined by a center point and a radius.",
                    "properties": {
                        "center": {
                            "type": "object",
                            "description": "The center point of the circle.",
                            "properties": {
                                "latitude": {"type": "number", "description": "The latitude of the center point."},
                                "longitude": {"type": "number", "description": "The longitude of the center point."},
                            },
                            "required": ["latitude", "longitude"],
                        },
                        "radius_meters": {"type": "number", "description": "The radius of the circle in meters."},
                    },
                    "required": ["center"],
                },
            },
        },
    },
    "required": ["text_query"],
    "additionalProperties": False,
}


class PlacesSearchTextArguments(BaseModel):
    text_query: str
    language_code: str | None = None
    region_code: str | None = None
    location_bias: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"textQuery": self.text_query}
        if self.language_code:
            body["languageCode"] = self.language_code
        if self.region_code:
            body["regionCode"] = self.region_code
        if self.location_bias:
            body["locationBias"] = self.location_bias
        return body


async def handle_places_search_text(
    request: ToolCallRequest, log: ToolLogger, *, client: MapsPlatformClient
) -> ToolResponse:
    try:
        args = PlacesSearchTextArguments.model_validate(request.arguments)
        await log.info(
            f"Calling tool {TOOL_NAME} with textQuery: {args.text_query}, "
            f"languageCode: {args.language_code}, regionCode: {args.region_code}, "
            f"locationBias: {json.dumps(args.location_bias)}"
        )
        body = args.to_body()
        return await call_upstream(request.name, partial(client.search_text, body), log)
    except Exception as exc:
        return await tool_failure(request.name, exc, log)


def places_search_text_tool(client: MapsPlatformClient) -> ToolDescriptor:
    return ToolDescriptor(
        name=TOOL_NAME,
        description=DESCRIPTION,
        input_schema=INPUT_SCHEMA,
        handler=partial(handle_places_search_text, client=client),
    )
