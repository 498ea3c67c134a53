"""Weather routes.

Thin proxy over OpenWeatherMap:

- GET /api/onecall - current weather (cached per lat/lon/units/lang)
- GET /api/onecalltimemachine - weather at midnight UTC of a date
- GET /api/onecalldaysummary - daily aggregation (cached per lat/lon/date)
- GET /api/onecallmonthsummary - daily aggregations for a month
- GET /api/search - city geocoding (cached per city/lang)
- GET /api/weather - current weather by city name
- GET /api/forecast - 5 day forecast
- GET /api/precipitations - precipitation accumulated over a day

Upstream failures are returned as 502 with the provider's message, and
store outages as 503.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from weather_lookup.api.dependencies import get_lookup_service, get_onecall_service
from weather_lookup.database.stores import StoreUnavailableError
from weather_lookup.models.location import Coordinates
from weather_lookup.providers.base import ProviderError
from weather_lookup.services.lookup import LookupService
from weather_lookup.services.onecall import OneCallService

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

LatQuery = Query(..., ge=-90, le=90, description="Latitude in decimal degrees")
LonQuery = Query(..., ge=-180, le=180, description="Longitude in decimal degrees")
DateQuery = Query(..., pattern=DATE_PATTERN, description="Date as YYYY-MM-DD")


def _upstream_failure(e: Exception) -> HTTPException:
    if isinstance(e, ProviderError):
        logger.error(f"Upstream request failed: {e.describe()}")
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.describe())

    logger.error(f"Weather store unavailable: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Weather cache unavailable",
    )


@router.get("/onecall")
async def get_onecall(
    lat: float = LatQuery,
    lon: float = LonQuery,
    units: str = Query(default="metric", pattern="^(standard|metric|imperial)$"),
    lang: str = Query(default="en", max_length=8),
    service: OneCallService = Depends(get_onecall_service),
) -> dict[str, Any]:
    """Current weather and forecast for a coordinate."""
    try:
        return await service.get_current_weather(
            Coordinates(latitude=lat, longitude=lon), units=units, lang=lang
        )
    except (ProviderError, StoreUnavailableError) as e:
        raise _upstream_failure(e)


@router.get("/onecalltimemachine")
async def get_onecall_timemachine(
    lat: float = LatQuery,
    lon: float = LonQuery,
    date: str = DateQuery,
    service: OneCallService = Depends(get_onecall_service),
) -> dict[str, Any]:
    """Historical weather for a coordinate at midnight UTC on `date`."""
    try:
        return await service.get_historical_weather(
            Coordinates(latitude=lat, longitude=lon), date
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date: {date}",
        )
    except ProviderError as e:
        raise _upstream_failure(e)


@router.get("/onecalldaysummary")
async def get_onecall_day_summary(
    lat: float = LatQuery,
    lon: float = LonQuery,
    date: str = DateQuery,
    service: OneCallService = Depends(get_onecall_service),
) -> dict[str, Any]:
    """Daily aggregation for a coordinate and date."""
    try:
        return await service.get_day_summary(Coordinates(latitude=lat, longitude=lon), date)
    except (ProviderError, StoreUnavailableError) as e:
        raise _upstream_failure(e)


@router.get("/onecallmonthsummary")
async def get_onecall_month_summary(
    lat: float = LatQuery,
    lon: float = LonQuery,
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    service: OneCallService = Depends(get_onecall_service),
) -> list[dict[str, Any]]:
    """Day summaries for each day of a month; days that fail are skipped."""
    return await service.get_month_summary(
        Coordinates(latitude=lat, longitude=lon), year, month
    )


@router.get("/search")
async def search_locations(
    city: str = Query(..., min_length=1, max_length=255),
    lang: str = Query(default="en", max_length=8),
    service: LookupService = Depends(get_lookup_service),
) -> list[dict[str, Any]]:
    """Places matching a city name (at most three)."""
    try:
        return await service.search(city, lang=lang)
    except (ProviderError, StoreUnavailableError) as e:
        raise _upstream_failure(e)


@router.get("/weather")
async def get_weather_by_city(
    city: str = Query(..., min_length=1, max_length=255),
    service: LookupService = Depends(get_lookup_service),
) -> dict[str, Any]:
    """Current weather for a city name."""
    try:
        return await service.weather_by_city(city)
    except ProviderError as e:
        raise _upstream_failure(e)


@router.get("/forecast")
async def get_forecast(
    lat: float = LatQuery,
    lon: float = LonQuery,
    service: LookupService = Depends(get_lookup_service),
) -> dict[str, Any]:
    """Multi-day forecast for a coordinate."""
    try:
        return await service.forecast(Coordinates(latitude=lat, longitude=lon))
    except ProviderError as e:
        raise _upstream_failure(e)


@router.get("/precipitations")
async def get_precipitations(
    lat: float = LatQuery,
    lon: float = LonQuery,
    date: str = DateQuery,
    service: LookupService = Depends(get_lookup_service),
) -> dict[str, Any]:
    """Precipitation accumulated over one UTC day."""
    try:
        return await service.precipitation(Coordinates(latitude=lat, longitude=lon), date)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date: {date}",
        )
    except ProviderError as e:
        raise _upstream_failure(e)
