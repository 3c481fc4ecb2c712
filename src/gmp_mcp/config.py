"""Server configuration — upstream endpoints, credentials, doc sources."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from gmp_mcp.errors import ConfigurationError

GOOGLE_MAPS_PLATFORM_SERVICE_URL = "https://mapstools.googleapis.com/v1alpha"
RAG_ENDPOINT = "https://rag-230009110455.us-central1.run.app"
DEFAULT_SOURCE = "github"

API_KEY_ENV = "GOOGLE_MAPS_API_KEY"
SOURCE_ENV = "SOURCE"

DEFAULT_CONTEXTS: tuple[str, ...] = (
    # General
    "Google Maps Platform",
    # Maps
    "Maps JavaScript API",
    "Maps SDK for Android",
    "Maps SDK for iOS",
    "Google Maps for Flutter",
    "Maps Embed API",
    "Maps Static API",
    "Street View Static API",
    "Maps URLs",
    "Elevation API",
    "Map Tiles API",
    "Maps Datasets API",
    "Web Components",
    "3D Maps",
    "Aerial View API",
    # Routes
    "Routes API",
    "Directions API",
    "Distance Matrix API",
    "Navigation SDK for Android",
    "Navigation SDK for iOS",
    "Navigation for Flutter",
    "Navigation for React Native",
    "Roads API",
    "Route Optimization API",
    # Places
    "Places UI Kit",
    "Places API (New)",
    "Places API (Legacy)",
    "Places SDK for Android",
    "Places SDK for iOS",
    "Places Library",
    "Geocoding API",
    "Geolocation API",
    "Address Validation API",
    "Time Zone API",
    # Environment
    "Air Quality API",
    "Pollen API",
    "Solar API",
    "Weather API",
    # Analytics
    "Imagery Insights",
    "Places Insights",
    "Road Management Insights",
)


class ServerSettings(BaseModel):
    """Settings shared by both servers.

    ``google_maps_api_key`` is only needed by the maps tools; the code assist
    server talks to the documentation service without it.
    """

    google_maps_api_key: str | None = None
    maps_service_url: str = GOOGLE_MAPS_PLATFORM_SERVICE_URL
    rag_endpoint: str = RAG_ENDPOINT
    source: str = DEFAULT_SOURCE
    default_contexts: list[str] = Field(default_factory=lambda: list(DEFAULT_CONTEXTS))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ServerSettings:
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            google_maps_api_key=env.get(API_KEY_ENV) or None,
            source=env.get(SOURCE_ENV) or DEFAULT_SOURCE,
        )

    def require_api_key(self) -> str:
        """Return the Maps API key or raise :class:`ConfigurationError`."""
        if not self.google_maps_api_key:
            msg = (
                f"Environment variable {API_KEY_ENV} not found. "
                "Please set it to your Google Maps API key."
            )
            raise ConfigurationError(msg)
        return self.google_maps_api_key
