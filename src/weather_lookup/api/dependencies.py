"""FastAPI dependencies wiring routes to services.

Collaborators are built from objects the app lifespan placed on
`app.state`, so tests can swap any of them with `app.dependency_overrides`.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends, Header, HTTPException, Request, status

from weather_lookup.config import Settings
from weather_lookup.database.connection import get_session_factory
from weather_lookup.database.stores import (
    SqlCurrentWeatherCache,
    SqlDaySummaryCache,
    SqlFavoritesStore,
    SqlLocationSearchCache,
)
from weather_lookup.jobs.favorites_refresh import FavoritesRefreshJob
from weather_lookup.providers.base import WeatherProvider
from weather_lookup.services.lookup import LookupService
from weather_lookup.services.onecall import OneCallService

CRON_LOGGER_NAME = "weather_lookup.cron"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_weather_provider(request: Request) -> WeatherProvider:
    return request.app.state.provider


def get_onecall_service(
    provider: WeatherProvider = Depends(get_weather_provider),
) -> OneCallService:
    factory = get_session_factory()
    return OneCallService(
        provider=provider,
        current_cache=SqlCurrentWeatherCache(factory),
        day_summary_cache=SqlDaySummaryCache(factory),
    )


def get_lookup_service(
    provider: WeatherProvider = Depends(get_weather_provider),
) -> LookupService:
    return LookupService(
        provider=provider,
        search_cache=SqlLocationSearchCache(get_session_factory()),
    )


def get_refresh_job(
    provider: WeatherProvider = Depends(get_weather_provider),
) -> FavoritesRefreshJob:
    factory = get_session_factory()
    return FavoritesRefreshJob(
        favorites=SqlFavoritesStore(factory),
        cache=SqlDaySummaryCache(factory),
        provider=provider,
        logger=logging.getLogger(CRON_LOGGER_NAME),
    )


async def verify_cron_secret(
    settings: Settings = Depends(get_app_settings),
    x_cron_secret: str | None = Header(default=None),
) -> None:
    """Require the X-Cron-Secret header when CRON_SECRET is configured."""
    if not settings.cron_secret:
        return

    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, settings.cron_secret):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid cron secret",
        )
