"""GoogleMapsPlatformWeatherLookup — current, hourly and daily weather."""

from __future__ import annotations

from functools import partial
from typing import Any, Literal

from pydantic import BaseModel, Field

from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.base import call_upstream, tool_failure
from gmp_mcp.upstream.client import MapsPlatformClient

TOOL_NAME = "GoogleMapsPlatformWeatherLookup"

DESCRIPTION = """
**Tool Name:** Weather Information Tool (Google Maps Platform)
**Core Functionality:** Provides current conditions, hourly, and daily forecasts for any location. Use this tool for all weather-related inquiries.
**Specific Data Available:** Temperature (Current, Feels Like, Max/Min, Heat Index), Wind (Speed, Gusts, Direction), Celestial Events (Sunrise/Sunset, Moon Phase), Precipitation (Type, Probability, Quantity/QPF), Atmospheric Conditions (UV Index, Humidity, Cloud Cover, Thunderstorm Probability), and Geocoded Location Address.

**Input Requirements (CRITICAL):**
* **Current Conditions:** Requires only a location (e.g., city or address).
* **Hourly Forecasts:** Requires a location and an **hour** (0-23). Use if the user asks for weather at a specific time or using terms like "next few hours," or "later today."
* **Daily Forecasts:** Requires a location and a full date.

Date Handling (CRITICAL): User-provided dates and hours MUST be provided in the local timezone of the requested location. Dates MUST be broken down into separate integer parameters: year, month, and day. The required format for these parameters is: {"year": <int>, "month": <int>, "day": <int>}.
"""

INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": (
        "Schema for requesting weather conditions based on a specific location, date, and hour, "
        "with optional unit system preferences."
    ),
    "properties": {
        "address": {
            "type": "string",
            "description": (
                "The address of the location to get the weather conditions for. "
                "This can be a street address, city, zip code, etc."
            ),
        },
        "date": {
            "type": "object",
            "description": "The date of the required weather information",
            "properties": {
                "year": {"type": "integer", "description": "The year of the requested weather information."},
                "month": {"type": "integer", "description": "The month of the requested weather information."},
                "day": {"type": "integer", "description": "The day of the requested weather information."},
            },
        },
        "hour": {
            "type": "integer",
            "description": "The hour of the requested weather information, in 24-hour format (0-23). ",
            "minimum": 0,
            "maximum": 23,
        },
        "unitsSystem": {
            "type": "string",
            "description": "The units system to use for the returned weather conditions.",
            "enum": ["METRIC", "IMPERIAL"],
            "default": "METRIC",
        },
    },
    "required": ["address"],
    "additionalProperties": False,
}


class WeatherDate(BaseModel):
    year: int | None = None
    month: int | None = None
    day: int | None = None


class WeatherLookupArguments(BaseModel):
    """Validated arguments; only supplied optional fields reach the upstream body."""

    model_config = {"populate_by_name": True}

    address: str
    date: WeatherDate | None = None
    hour: int | None = Field(default=None, ge=0, le=23)
    units_system: Literal["METRIC", "IMPERIAL"] | None = Field(default=None, alias="unitsSystem")

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"address": self.address}
        if self.date is not None:
            body["date"] = self.date.model_dump(exclude_none=True)
        if self.hour is not None:
            body["hour"] = self.hour
        if self.units_system:
            body["unitsSystem"] = self.units_system
        return body


async def handle_weather_lookup(
    request: ToolCallRequest, log: ToolLogger, *, client: MapsPlatformClient
) -> ToolResponse:
    try:
        args = WeatherLookupArguments.model_validate(request.arguments)
        date = args.date or WeatherDate()
        await log.info(
            f"Calling tool {TOOL_NAME} with address: {args.address}, "
            f"date: {{year: {date.year}, month: {date.month}, day: {date.day}}}, "
            f"hour: {args.hour}, unitsSystem: {args.units_system}"
        )
        body = args.to_body()
        return await call_upstream(request.name, partial(client.weather_lookup, body), log)
    except Exception as exc:
        return await tool_failure(request.name, exc, log)


def weather_lookup_tool(client: MapsPlatformClient) -> ToolDescriptor:
    return ToolDescriptor(
        name=TOOL_NAME,
        description=DESCRIPTION,
        input_schema=INPUT_SCHEMA,
        handler=partial(handle_weather_lookup, client=client),
    )
