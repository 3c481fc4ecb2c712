"""GoogleMapsPlatformComputeRoutes — a route between two waypoints.

Each waypoint arrives as an object holding one of ``lat_lng``, ``place_id``
or ``address``. When a caller supplies more than one, the first match in
that order wins; an object with none of them resolves to ``{}`` and is left
for the upstream API to reject.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import partial
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.base import call_upstream, tool_failure
from gmp_mcp.upstream.client import MapsPlatformClient

TOOL_NAME = "GoogleMapsPlatformComputeRoutes"

DESCRIPTION = """
**Tool Name:** Route Computation Tool
**Core Functionality:** Computes a travel route between a specified origin and destination.
**Supported Travel Modes:** DRIVE (default), WALK.

**Input Requirements (CRITICAL):**
Requires both **origin** and **destination**. Each must be provided using one of the following methods, nested within its respective field:
* **address:** (string, e.g., "Eiffel Tower, Paris"). Note: The more granular or specific the input address is, the better the results will be.
* **lat_lng:** (object, {"latitude": number, "longitude": number})
* **place_id:** (string, e.g., "ChIJOwE_Id1w5EAR4Q27FkL6T_0") Note: This id can be obtained from Google Maps Places API or from GoogleMapsPlatformPlacesSearchText.

Any combination of input types is allowed (e.g., origin by address, destination by lat_lng). If either the origin or destination is missing, **you MUST ask the user for clarification** before attempting to call the tool.

**Example Tool Call:**
{"origin":{"address":"Eiffel Tower"},"destination":{"place_id":"ChIJt_5xIthw5EARoJ71mGq7t74"},"travel_mode":"DRIVE"}
"""

_LAT_LNG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "The latitude and longitude of the point.",
    "properties": {
        "latitude": {"type": "number", "description": "The latitude of the point."},
        "longitude": {"type": "number", "description": "The longitude of the point."},
    },
    "required": ["latitude", "longitude"],
}
_PLACE_ID_SCHEMA: dict[str, Any] = {"type": "string", "description": "The Place ID of the point."}
_ADDRESS_SCHEMA: dict[str, Any] = {"type": "string", "description": "The address of the point."}


def _waypoint_schema(description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "description": description,
        "oneOf": [
            {"properties": {"lat_lng": _LAT_LNG_SCHEMA}, "required": ["lat_lng"]},
            {"properties": {"place_id": _PLACE_ID_SCHEMA}, "required": ["place_id"]},
            {"properties": {"address": _ADDRESS_SCHEMA}, "required": ["address"]},
        ],
    }


INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Schema for computing routes between an origin and a destination.",
    "properties": {
        "origin": _waypoint_schema("The starting point for the route (e.g., 'Eiffel Tower, Paris')."),
        "destination": _waypoint_schema("The ending point for the route (e.g., 'Louvre Museum, Paris')."),
        "travel_mode": {
            "type": "string",
            "description": "The mode of travel (e.g., 'DRIVE', 'WALK').",
            "enum": ["DRIVE", "WALK"],
            "default": "DRIVE",
        },
    },
    "required": ["origin", "destination"],
    "additionalProperties": False,
}

# ---------------------------------------------------------------------------
# Waypoints
# ---------------------------------------------------------------------------


class LatLngWaypoint(BaseModel):
    kind: Literal["lat_lng"] = "lat_lng"
    lat_lng: Any

    def to_body(self) -> dict[str, Any]:
        return {"latLng": self.lat_lng}


class PlaceIdWaypoint(BaseModel):
    kind: Literal["place_id"] = "place_id"
    place_id: str

    def to_body(self) -> dict[str, Any]:
        return {"placeId": self.place_id}


class AddressWaypoint(BaseModel):
    kind: Literal["address"] = "address"
    address: str

    def to_body(self) -> dict[str, Any]:
        return {"address": self.address}


Waypoint = LatLngWaypoint | PlaceIdWaypoint | AddressWaypoint


def parse_waypoint(raw: Mapping[str, Any] | None) -> Waypoint | None:
    """Pick the waypoint variant by priority: lat/lng, place id, address."""
    if not raw:
        return None
    if raw.get("lat_lng"):
        return LatLngWaypoint(lat_lng=raw["lat_lng"])
    if raw.get("place_id"):
        return PlaceIdWaypoint(place_id=raw["place_id"])
    if raw.get("address"):
        return AddressWaypoint(address=raw["address"])
    return None


def resolve_waypoint(raw: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return the upstream waypoint body, ``{}`` when nothing usable was given."""
    waypoint = parse_waypoint(raw)
    return waypoint.to_body() if waypoint is not None else {}


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


class ComputeRoutesArguments(BaseModel):
    origin: dict[str, Any]
    destination: dict[str, Any]
    travel_mode: Literal["DRIVE", "WALK"] = Field(
        default="DRIVE",
        validation_alias=AliasChoices("travel_mode", "travelMode"),
    )

    def to_body(self) -> dict[str, Any]:
        return {
            "origin": resolve_waypoint(self.origin),
            "destination": resolve_waypoint(self.destination),
            "travel_mode": self.travel_mode,
        }


async def handle_compute_routes(
    request: ToolCallRequest, log: ToolLogger, *, client: MapsPlatformClient
) -> ToolResponse:
    try:
        args = ComputeRoutesArguments.model_validate(request.arguments)
        body = args.to_body()
        await log.info(
            f"Calling tool {TOOL_NAME} with: {{ origin: {json.dumps(body['origin'])}, "
            f"destination: {json.dumps(body['destination'])}, travelMode: {args.travel_mode} }}"
        )
        return await call_upstream(request.name, partial(client.compute_routes, body), log)
    except Exception as exc:
        return await tool_failure(request.name, exc, log)


def compute_routes_tool(client: MapsPlatformClient) -> ToolDescriptor:
    return ToolDescriptor(
        name=TOOL_NAME,
        description=DESCRIPTION,
        input_schema=INPUT_SCHEMA,
        handler=partial(handle_compute_routes, client=client),
    )
