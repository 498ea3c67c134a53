"""One Call lookups behind the weather routes.

Current weather and day summaries are cache-first: a stored response is
returned as-is, otherwise the provider is called and the response stored.
Historical (timemachine) lookups always go upstream. A month summary is the
day summary lookup repeated for each day of the month.

Errors propagate to the caller; routes turn them into HTTP responses.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

from weather_lookup.database.stores import (
    SqlCurrentWeatherCache,
    SqlDaySummaryCache,
    StoreUnavailableError,
)
from weather_lookup.models.location import Coordinates
from weather_lookup.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


def date_to_timestamp(date: str) -> int:
    """Unix timestamp (seconds) of midnight UTC on a YYYY-MM-DD date."""
    day = datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(day.timestamp())


class OneCallService:
    """Cache-aware access to the One Call endpoints."""

    def __init__(
        self,
        provider: WeatherProvider,
        current_cache: SqlCurrentWeatherCache,
        day_summary_cache: SqlDaySummaryCache,
        today: Callable[[], date] = date.today,
    ):
        self.provider = provider
        self.current_cache = current_cache
        self.day_summary_cache = day_summary_cache
        self.today = today

    async def get_current_weather(
        self,
        coordinates: Coordinates,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        lat, lon = coordinates.to_tuple()

        existing = await self.current_cache.get(lat, lon, units, lang)
        if existing is not None:
            return existing

        data = await self.provider.get_current_weather(coordinates, units=units, lang=lang)
        await self.current_cache.put(lat, lon, units, lang, data)
        return data

    async def get_historical_weather(
        self,
        coordinates: Coordinates,
        date: str,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        return await self.provider.get_historical_weather(
            coordinates,
            timestamp=date_to_timestamp(date),
            units=units,
            lang=lang,
        )

    async def get_day_summary(self, coordinates: Coordinates, date: str) -> dict[str, Any]:
        lat, lon = coordinates.to_tuple()

        existing = await self.day_summary_cache.get(lat, lon, date)
        if existing is not None:
            return existing

        data = await self.provider.fetch_day_summary(lat, lon, date)
        await self.day_summary_cache.put(lat, lon, date, data)
        return data

    async def get_month_summary(
        self,
        coordinates: Coordinates,
        year: int,
        month: int,
    ) -> list[dict[str, Any]]:
        """Day summaries for every day of a month, oldest first.

        The current month stops at today. Days that cannot be fetched are
        logged and left out, so the list may be shorter than the month.

        Raises:
            ValueError: If year/month is not a valid month
        """
        first = date(year, month, 1)
        current = self.today()
        if (year, month) == (current.year, current.month):
            last = current
        else:
            last = first.replace(day=calendar.monthrange(year, month)[1])

        summaries = []
        day = first
        while day <= last:
            iso_day = day.isoformat()
            try:
                summaries.append(await self.get_day_summary(coordinates, iso_day))
            except ProviderError as e:
                logger.warning(f"Could not fetch day summary for {iso_day}: {e.describe()}")
            except StoreUnavailableError as e:
                logger.warning(f"Could not fetch day summary for {iso_day}: {e}")
            day += timedelta(days=1)

        return summaries
