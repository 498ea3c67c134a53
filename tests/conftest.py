"""Pytest fixtures for weather lookup tests.

This module provides test fixtures that ensure:
1. No external API calls are made (the upstream provider is always faked)
2. Databases are throwaway SQLite files under tmp_path
3. Isolated test environment with controlled configuration
"""

import asyncio
import logging
import os
import uuid
from datetime import datetime
from typing import Any

import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from weather_lookup.config import Settings
from weather_lookup.database.connection import (
    close_db,
    create_tables,
    get_session_factory,
    init_db,
)
from weather_lookup.database.models import User, UserFavorite
from weather_lookup.models.location import Coordinates, FavoriteLocation
from weather_lookup.providers.base import ProviderError

TEST_SECRET = "test-secret-key-at-least-32-characters-long"

# Fixed "now" used by the refresh job tests; yesterday is 2025-03-28
FIXED_NOW = datetime(2025, 3, 29, 9, 30)
YESTERDAY = "2025-03-28"


# =============================================================================
# In-memory collaborators
# =============================================================================


class InMemoryFavoritesStore:
    """Favorites store backed by a list."""

    def __init__(self, favorites: list[FavoriteLocation] | None = None, error: Exception | None = None):
        self.favorites = list(favorites or [])
        self.error = error
        self.calls = 0

    async def list_all(self) -> list[FavoriteLocation]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.favorites)


class InMemoryDaySummaryCache:
    """Day summary cache backed by a dict, recording every call."""

    def __init__(
        self,
        entries: dict[tuple[float, float, str], Any] | None = None,
        get_error: Exception | None = None,
        put_error: Exception | None = None,
    ):
        self.entries = dict(entries or {})
        self.get_error = get_error
        self.put_error = put_error
        self.get_calls: list[tuple[float, float, str]] = []
        self.put_calls: list[tuple[float, float, str]] = []

    async def get(self, latitude: float, longitude: float, date: str) -> Any | None:
        self.get_calls.append((latitude, longitude, date))
        if self.get_error:
            raise self.get_error
        return self.entries.get((latitude, longitude, date))

    async def put(self, latitude: float, longitude: float, date: str, summary: Any) -> None:
        self.put_calls.append((latitude, longitude, date))
        if self.put_error:
            raise self.put_error
        self.entries[(latitude, longitude, date)] = summary


class FakeDaySummaryProvider:
    """Provider returning canned summaries, failing for chosen coordinates.

    `delays` lets a test make some locations finish later than others, and
    `failing_dates` fails every location on the given dates.
    """

    def __init__(
        self,
        failures: dict[tuple[float, float], Exception] | None = None,
        delays: dict[tuple[float, float], float] | None = None,
        failing_dates: dict[str, Exception] | None = None,
    ):
        self.failures = failures or {}
        self.delays = delays or {}
        self.failing_dates = failing_dates or {}
        self.calls: list[tuple[float, float, str]] = []

    @staticmethod
    def summary_for(latitude: float, longitude: float, date: str) -> dict[str, Any]:
        return {
            "lat": latitude,
            "lon": longitude,
            "date": date,
            "precipitation": {"total": 1.5},
        }

    async def fetch_day_summary(self, latitude: float, longitude: float, date: str) -> dict[str, Any]:
        self.calls.append((latitude, longitude, date))
        delay = self.delays.get((latitude, longitude))
        if delay:
            await asyncio.sleep(delay)
        error = self.failures.get((latitude, longitude)) or self.failing_dates.get(date)
        if error:
            raise error
        return self.summary_for(latitude, longitude, date)


class FakeWeatherProvider(FakeDaySummaryProvider):
    """Full provider fake for the service and API tests."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.current_calls: list[tuple[float, float, str, str]] = []
        self.historical_calls: list[tuple[float, float, int]] = []
        self.current_error: Exception | None = None
        self.lookup_error: Exception | None = None
        self.geocode_calls: list[tuple[str, str]] = []
        self.city_calls: list[str] = []
        self.forecast_calls: list[tuple[float, float]] = []
        self.precipitation_calls: list[tuple[float, float, int, int]] = []

    async def get_current_weather(
        self, coordinates: Coordinates, units: str = "metric", lang: str = "en"
    ) -> dict[str, Any]:
        self.current_calls.append((coordinates.latitude, coordinates.longitude, units, lang))
        if self.current_error:
            raise self.current_error
        return {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "current": {"temp": 12.3, "weather": [{"description": "light rain"}]},
        }

    async def get_historical_weather(
        self, coordinates: Coordinates, timestamp: int, units: str = "metric", lang: str = "en"
    ) -> dict[str, Any]:
        self.historical_calls.append((coordinates.latitude, coordinates.longitude, timestamp))
        return {"lat": coordinates.latitude, "lon": coordinates.longitude, "data": [{"dt": timestamp}]}

    async def geocode(self, city: str, lang: str = "en") -> list[dict[str, Any]]:
        self.geocode_calls.append((city, lang))
        if self.lookup_error:
            raise self.lookup_error
        return [{"name": city, "lat": 48.85, "lon": 2.35, "country": "FR"}]

    async def get_weather_by_city(self, city: str) -> dict[str, Any]:
        self.city_calls.append(city)
        if self.lookup_error:
            raise self.lookup_error
        return {"name": city, "main": {"temp": 11.0}}

    async def get_forecast(self, coordinates: Coordinates) -> dict[str, Any]:
        self.forecast_calls.append((coordinates.latitude, coordinates.longitude))
        return {"cnt": 40, "list": []}

    async def get_precipitation(
        self, coordinates: Coordinates, start: int, end: int
    ) -> dict[str, Any]:
        self.precipitation_calls.append((coordinates.latitude, coordinates.longitude, start, end))
        return {"cod": "200", "result": [{"rain": 0.4, "count": 1}]}

    async def aclose(self) -> None:
        pass


def upstream_error(status_code: int = 500, message: str = "Internal error") -> ProviderError:
    return ProviderError(message, provider="openweather", status_code=status_code)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from weather_lookup.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def job_logger() -> logging.Logger:
    return logging.getLogger("weather_lookup.tests.cron")


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'weather.db'}"


@pytest.fixture
async def session_factory(database_url: str):
    """Initialized database with all tables, closed after the test."""
    await init_db(database_url)
    await create_tables()
    yield get_session_factory()
    await close_db()


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        database_url=database_url,
        environment="development",
        openweather_api_key="test-api-key",
    )


async def seed_favorites(
    database_url: str,
    favorites_by_user: dict[str, list[tuple[str, float, float]]],
) -> dict[str, uuid.UUID]:
    """Create users and their favorites; returns user ids by username."""
    await init_db(database_url)
    await create_tables()
    user_ids: dict[str, uuid.UUID] = {}
    try:
        async with get_session_factory()() as session:
            for username, favorites in favorites_by_user.items():
                user = User(username=username, email=f"{username}@example.com")
                session.add(user)
                await session.flush()
                user_ids[username] = user.id
                for order, (name, lat, lon) in enumerate(favorites):
                    session.add(
                        UserFavorite(
                            user_id=user.id,
                            location_name=name,
                            latitude=lat,
                            longitude=lon,
                            country_code="FR",
                            order=order,
                        )
                    )
            await session.commit()
    finally:
        await close_db()
    return user_ids
