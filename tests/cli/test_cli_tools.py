"""Tests for ``gmp-mcp tools`` CLI command."""

from __future__ import annotations

from click.testing import CliRunner

from gmp_mcp.cli import main


class TestToolsCommand:
    def test_maps_tools(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "maps"], env={"GOOGLE_MAPS_API_KEY": None})

        assert result.exit_code == 0
        assert "GoogleMapsPlatformWeatherLookup" in result.output
        assert "GoogleMapsPlatformComputeRoutes" in result.output

    def test_code_assist_tools(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "code-assist"])

        assert result.exit_code == 0
        assert "retrieve-instructions" in result.output

    def test_unknown_server(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "weather"])

        assert result.exit_code == 2
