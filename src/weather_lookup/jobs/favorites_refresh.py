"""Favorites refresh job.

Makes sure yesterday's day summary is cached for every distinct favorite
coordinate, so favorites pages can show recent precipitation without
hitting the upstream API.

## Run

1. List every stored favorite (all users)
2. Collapse favorites sharing an exact (latitude, longitude) pair, keeping
   the first one seen
3. Compute yesterday's date once for the whole run
4. For each unique location, concurrently:
   a. Serve from the day summary cache when present
   b. Otherwise fetch from the provider and write it to the cache
5. Report per-location outcomes in input order

A failing location never stops the others. Only failing to list favorites
aborts the run (`FatalRunError`). A cache write that fails after a
successful fetch is logged and the location still counts as a success.

Collaborators are injected so the job can be driven by the HTTP trigger,
the CLI, or tests with in-memory fakes.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Protocol, Sequence

from weather_lookup.models.location import FavoriteLocation
from weather_lookup.models.refresh import LocationOutcome, RunResult
from weather_lookup.providers.base import ProviderError

DATE_FORMAT = "%Y-%m-%d"


class FavoritesStore(Protocol):
    async def list_all(self) -> Sequence[FavoriteLocation]: ...


class DaySummaryCache(Protocol):
    async def get(self, latitude: float, longitude: float, date: str) -> Any | None: ...

    async def put(self, latitude: float, longitude: float, date: str, summary: Any) -> None: ...


class DaySummaryProvider(Protocol):
    async def fetch_day_summary(self, latitude: float, longitude: float, date: str) -> Any: ...


class FatalRunError(Exception):
    """The run could not start because favorites could not be listed."""


def deduplicate_favorites(favorites: Sequence[FavoriteLocation]) -> list[FavoriteLocation]:
    """Keep the first favorite for each exact (latitude, longitude) pair."""
    unique: dict[tuple[float, float], FavoriteLocation] = {}
    for favorite in favorites:
        unique.setdefault(favorite.key, favorite)
    return list(unique.values())


def reference_date(now: datetime) -> str:
    """Yesterday relative to `now`, as YYYY-MM-DD."""
    return (now - timedelta(days=1)).strftime(DATE_FORMAT)


def _error_message(error: Exception) -> str:
    if isinstance(error, ProviderError):
        return error.describe()
    return f"Error: {error}"


class FavoritesRefreshJob:
    """Refresh cached day summaries for all favorite locations.

    Example:
        ```python
        job = FavoritesRefreshJob(
            favorites=SqlFavoritesStore(factory),
            cache=SqlDaySummaryCache(factory),
            provider=provider,
            logger=logging.getLogger("weather_lookup.cron"),
        )
        result = await job.run()
        ```
    """

    def __init__(
        self,
        favorites: FavoritesStore,
        cache: DaySummaryCache,
        provider: DaySummaryProvider,
        logger: logging.Logger,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the job.

        Args:
            favorites: Source of all stored favorites
            cache: Day summary cache
            provider: Upstream day summary source
            logger: Logger owned by the caller
            clock: Returns the current local time; read once per run
        """
        self.favorites = favorites
        self.cache = cache
        self.provider = provider
        self.logger = logger
        self.clock = clock

    async def run(self) -> RunResult:
        """Execute one refresh run.

        Returns:
            RunResult with per-location details in deduplicated input order

        Raises:
            FatalRunError: If the favorites could not be listed
        """
        now = self.clock()
        self.logger.info(f"Favorites refresh started at {now.isoformat()}")

        try:
            favorites = await self.favorites.list_all()
        except Exception as e:
            self.logger.error(f"Critical error listing favorites: {e}")
            raise FatalRunError(f"Could not list favorites: {e}") from e

        if not favorites:
            self.logger.info("No favorite locations found.")
            return RunResult.empty()

        unique = deduplicate_favorites(favorites)
        self.logger.info(
            f"Found {len(unique)} unique favorite locations after deduplication."
        )

        date = reference_date(now)

        # gather keeps results in submission order
        outcomes = await asyncio.gather(
            *(self._refresh_location(favorite, date) for favorite in unique)
        )

        result = RunResult.from_outcomes(list(outcomes), date)
        self.logger.info(
            f"Favorites refresh completed: {result.successes} successes, "
            f"{result.errors} errors"
        )
        return result

    async def _refresh_location(self, favorite: FavoriteLocation, date: str) -> LocationOutcome:
        name = favorite.location_name
        try:
            coords = favorite.coordinates()
            lat, lon = coords.latitude, coords.longitude

            cached = await self.cache.get(lat, lon, date)
            if cached is not None:
                self.logger.info(f"Cache hit for {name} ({lat}, {lon})")
                return LocationOutcome.success(name, cached)

            summary = await self.provider.fetch_day_summary(lat, lon, date)
            await self._save(favorite, lat, lon, date, summary)
        except Exception as e:
            message = _error_message(e)
            self.logger.error(f"Error processing {name}: {message}")
            return LocationOutcome.failure(name, message)

        self.logger.info(f"Successfully processed {name} ({lat}, {lon})")
        return LocationOutcome.success(name, summary)

    async def _save(
        self,
        favorite: FavoriteLocation,
        lat: float,
        lon: float,
        date: str,
        summary: Any,
    ) -> None:
        try:
            await self.cache.put(lat, lon, date, summary)
        except Exception as e:
            self.logger.error(
                f"Fetched {favorite.location_name} but could not cache the summary: {e}"
            )
