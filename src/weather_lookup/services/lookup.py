"""City search and quick weather lookups.

Geocoding results are cached per (city, lang). Weather by city, forecast
and precipitation are passthroughs to the upstream API.
"""

from __future__ import annotations

import logging
from typing import Any

from weather_lookup.database.stores import SqlLocationSearchCache
from weather_lookup.models.location import Coordinates
from weather_lookup.providers.base import WeatherProvider
from weather_lookup.services.onecall import date_to_timestamp

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class LookupService:
    """Lookups used by the search box and the precipitation chart."""

    def __init__(self, provider: WeatherProvider, search_cache: SqlLocationSearchCache):
        self.provider = provider
        self.search_cache = search_cache

    async def search(self, city: str, lang: str = "en") -> list[dict[str, Any]]:
        """Candidate places for a city name, served from cache when known."""
        existing = await self.search_cache.get(city, lang)
        if existing is not None:
            return existing

        results = await self.provider.geocode(city, lang=lang)
        await self.search_cache.put(city, lang, results)
        return results

    async def weather_by_city(self, city: str) -> dict[str, Any]:
        return await self.provider.get_weather_by_city(city)

    async def forecast(self, coordinates: Coordinates) -> dict[str, Any]:
        return await self.provider.get_forecast(coordinates)

    async def precipitation(self, coordinates: Coordinates, date: str) -> dict[str, Any]:
        """Precipitation accumulated over one UTC day.

        Raises:
            ValueError: If `date` is not a real calendar date
        """
        start = date_to_timestamp(date)
        return await self.provider.get_precipitation(
            coordinates, start=start, end=start + SECONDS_PER_DAY - 1
        )
