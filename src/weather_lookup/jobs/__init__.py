"""Scheduled jobs."""

from weather_lookup.jobs.favorites_refresh import (
    DaySummaryCache,
    DaySummaryProvider,
    FatalRunError,
    FavoritesRefreshJob,
    FavoritesStore,
    deduplicate_favorites,
    reference_date,
)

__all__ = [
    "DaySummaryCache",
    "DaySummaryProvider",
    "FatalRunError",
    "FavoritesRefreshJob",
    "FavoritesStore",
    "deduplicate_favorites",
    "reference_date",
]
