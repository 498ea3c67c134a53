"""SQL-backed stores used by the weather services and the refresh job.

Each store owns short-lived sessions from the factory it was built with, so
concurrent callers never share a session. Database failures are re-raised
as `StoreUnavailableError` with the original exception chained.

## Usage

```python
factory = get_session_factory()
favorites = SqlFavoritesStore(factory)
cache = SqlDaySummaryCache(factory)

for favorite in await favorites.list_all():
    summary = await cache.get(favorite.latitude, favorite.longitude, "2025-03-28")
```
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from weather_lookup.database.models import (
    LocationSearch,
    UserFavorite,
    WeatherDaySummary,
    WeatherOneCall,
)
from weather_lookup.models.location import FavoriteLocation

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the backing database cannot serve a request."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation


class SqlFavoritesStore:
    """Read access to every user's favorites."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_all(self) -> list[FavoriteLocation]:
        """Return all stored favorites across users, in insertion order."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(
                        UserFavorite.latitude,
                        UserFavorite.longitude,
                        UserFavorite.location_name,
                    ).order_by(UserFavorite.created_at, UserFavorite.id)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list favorites: {e}")
            raise StoreUnavailableError(
                f"Failed to list favorites: {e}", operation="list_favorites"
            ) from e

        return [
            FavoriteLocation(
                latitude=row.latitude,
                longitude=row.longitude,
                location_name=row.location_name,
            )
            for row in rows
        ]


class SqlDaySummaryCache:
    """Day summaries keyed by (latitude, longitude, date)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, latitude: float, longitude: float, date: str) -> dict[str, Any] | None:
        """Return the cached summary, or None on a miss."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(WeatherDaySummary.data).where(
                        WeatherDaySummary.latitude == latitude,
                        WeatherDaySummary.longitude == longitude,
                        WeatherDaySummary.date == date,
                    )
                )
                data = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to read day summary: {e}", operation="get_day_summary"
            ) from e

        if data is not None:
            logger.info(
                f"Day summary for lat={latitude}, lon={longitude}, date={date} served from cache"
            )
        return data

    async def put(
        self,
        latitude: float,
        longitude: float,
        date: str,
        summary: dict[str, Any],
    ) -> None:
        """Store a summary, replacing any existing entry for the same key."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(WeatherDaySummary).where(
                        WeatherDaySummary.latitude == latitude,
                        WeatherDaySummary.longitude == longitude,
                        WeatherDaySummary.date == date,
                    )
                )
                row = result.scalar_one_or_none()
                if row:
                    row.data = summary
                else:
                    session.add(
                        WeatherDaySummary(
                            latitude=latitude,
                            longitude=longitude,
                            date=date,
                            data=summary,
                        )
                    )
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to save day summary: {e}", operation="put_day_summary"
            ) from e

        logger.info(f"Day summary for lat={latitude}, lon={longitude}, date={date} saved")


class SqlCurrentWeatherCache:
    """Current weather responses keyed by (latitude, longitude, units, lang)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(
        self,
        latitude: float,
        longitude: float,
        units: str,
        lang: str,
    ) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(WeatherOneCall.data).where(
                        WeatherOneCall.latitude == latitude,
                        WeatherOneCall.longitude == longitude,
                        WeatherOneCall.units == units,
                        WeatherOneCall.lang == lang,
                    )
                )
                data = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to read current weather: {e}", operation="get_current_weather"
            ) from e

        if data is not None:
            logger.info(f"Current weather for lat={latitude}, lon={longitude} served from cache")
        return data

    async def put(
        self,
        latitude: float,
        longitude: float,
        units: str,
        lang: str,
        data: dict[str, Any],
    ) -> None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(WeatherOneCall).where(
                        WeatherOneCall.latitude == latitude,
                        WeatherOneCall.longitude == longitude,
                        WeatherOneCall.units == units,
                        WeatherOneCall.lang == lang,
                    )
                )
                row = result.scalar_one_or_none()
                if row:
                    row.data = data
                else:
                    session.add(
                        WeatherOneCall(
                            latitude=latitude,
                            longitude=longitude,
                            units=units,
                            lang=lang,
                            data=data,
                        )
                    )
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to save current weather: {e}", operation="put_current_weather"
            ) from e

        logger.info(f"Current weather for lat={latitude}, lon={longitude} saved")


class SqlLocationSearchCache:
    """Geocoding results keyed by (city, lang)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, city: str, lang: str) -> list[dict[str, Any]] | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(LocationSearch.data).where(
                        LocationSearch.city == city,
                        LocationSearch.lang == lang,
                    )
                )
                data = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to read location search: {e}", operation="get_location_search"
            ) from e

        if data is not None:
            logger.info(f"Location search for city={city}, lang={lang} served from cache")
        return data

    async def put(self, city: str, lang: str, data: list[dict[str, Any]]) -> None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(LocationSearch).where(
                        LocationSearch.city == city,
                        LocationSearch.lang == lang,
                    )
                )
                row = result.scalar_one_or_none()
                if row:
                    row.data = data
                else:
                    session.add(LocationSearch(city=city, lang=lang, data=data))
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Failed to save location search: {e}", operation="put_location_search"
            ) from e

        logger.info(f"Location search for city={city}, lang={lang} saved")
