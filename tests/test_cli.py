"""Tests for the command-line interface."""

import asyncio
import json
import sys

import pytest

from conftest import FakeWeatherProvider, seed_favorites
from weather_lookup import cli


class ContextFakeProvider(FakeWeatherProvider):
    """Fake provider usable as `async with`, the way the CLI opens it."""

    def __init__(self, **kwargs):
        super().__init__()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


@pytest.fixture
def run_cli(monkeypatch, capsys, database_url):
    """Run `weather-lookup <args>` against the test database."""
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    def _run(*args: str) -> tuple[int, dict]:
        monkeypatch.setattr(sys, "argv", ["weather-lookup", *args])
        exit_code = cli.main()
        return exit_code, json.loads(capsys.readouterr().out)

    return _run


class TestRefreshFavorites:
    """Tests for `weather-lookup refresh-favorites`."""

    def test_no_favorites(self, run_cli, database_url):
        asyncio.run(seed_favorites(database_url, {}))

        exit_code, output = run_cli("refresh-favorites")

        assert exit_code == 0
        assert output["message"] == "No favorite locations to process"
        assert output["summary"] == {"total": 0, "successes": 0, "errors": 0, "details": []}

    def test_missing_tables_is_fatal(self, run_cli):
        exit_code, output = run_cli("refresh-favorites")

        assert exit_code == 1
        assert output == {"error": "Internal server error during scheduled check"}

    def test_location_errors_still_exit_zero(self, run_cli, database_url):
        """Without an API key every location fails, but the run completes."""
        asyncio.run(seed_favorites(database_url, {"alice": [("Paris", 48.85, 2.35)]}))

        exit_code, output = run_cli("refresh-favorites")

        assert exit_code == 0
        assert output["message"] == "Scheduled check completed"
        assert output["summary"]["errors"] == 1
        assert output["summary"]["details"] == [
            {
                "location": "Paris",
                "status": "error",
                "error": "Error: API key required for openweather",
            }
        ]

    def test_seeded_run_prints_summary(self, run_cli, database_url, monkeypatch):
        asyncio.run(seed_favorites(database_url, {
            "alice": [("Paris", 48.85, 2.35)],
            "bob": [("Paris", 48.85, 2.35), ("NYC", 40.71, -74.0)],
        }))
        monkeypatch.setattr(
            "weather_lookup.providers.openweather.OpenWeatherProvider", ContextFakeProvider
        )

        exit_code, output = run_cli("refresh-favorites")

        assert exit_code == 0
        assert output["message"] == "Scheduled check completed"
        summary = output["summary"]
        assert (summary["total"], summary["successes"], summary["errors"]) == (2, 2, 0)
        assert {d["location"] for d in summary["details"]} == {"Paris", "NYC"}
        assert all(d["status"] == "success" for d in summary["details"])


class TestMain:
    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["weather-lookup"])

        assert cli.main() == 0
        assert "refresh-favorites" in capsys.readouterr().out
