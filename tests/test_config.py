"""Tests for ServerSettings."""

from __future__ import annotations

import pytest

from gmp_mcp.config import (
    DEFAULT_SOURCE,
    GOOGLE_MAPS_PLATFORM_SERVICE_URL,
    RAG_ENDPOINT,
    ServerSettings,
)
from gmp_mcp.errors import ConfigurationError


class TestFromEnv:
    def test_reads_key_and_source(self) -> None:
        settings = ServerSettings.from_env({"GOOGLE_MAPS_API_KEY": "abc", "SOURCE": "devsite"})
        assert settings.google_maps_api_key == "abc"
        assert settings.source == "devsite"

    def test_defaults(self) -> None:
        settings = ServerSettings.from_env({})
        assert settings.google_maps_api_key is None
        assert settings.source == DEFAULT_SOURCE == "github"
        assert settings.maps_service_url == GOOGLE_MAPS_PLATFORM_SERVICE_URL
        assert settings.rag_endpoint == RAG_ENDPOINT

    def test_empty_values_fall_back(self) -> None:
        settings = ServerSettings.from_env({"GOOGLE_MAPS_API_KEY": "", "SOURCE": ""})
        assert settings.google_maps_api_key is None
        assert settings.source == "github"

    def test_uses_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
        assert ServerSettings.from_env().google_maps_api_key == "from-env"


class TestRequireApiKey:
    def test_returns_key(self) -> None:
        assert ServerSettings(google_maps_api_key="k").require_api_key() == "k"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="GOOGLE_MAPS_API_KEY not found"):
            ServerSettings().require_api_key()


class TestDefaultContexts:
    def test_product_list(self) -> None:
        contexts = ServerSettings().default_contexts
        assert "Google Maps Platform" in contexts
        assert "Weather API" in contexts
        assert "Routes API" in contexts

    def test_not_shared_between_instances(self) -> None:
        a = ServerSettings()
        a.default_contexts.append("Custom")
        assert "Custom" not in ServerSettings().default_contexts
