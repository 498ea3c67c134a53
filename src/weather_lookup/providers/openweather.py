"""OpenWeatherMap provider.

One Call 3.0 is the main API. Geocoding, the 2.5 weather and forecast
endpoints and the history API back the city search and quick lookups.

## API Documentation Summary
Sources: https://openweathermap.org/api/one-call-3,
https://openweathermap.org/api/geocoding-api,
https://openweathermap.org/api/accumulated-parameters

## Endpoints
| Operation | URL |
|-----------|-----|
| Current + forecast | https://api.openweathermap.org/data/3.0/onecall |
| Historical (timestamp) | .../onecall/timemachine |
| Daily aggregation | .../onecall/day_summary |
| City search | https://api.openweathermap.org/geo/1.0/direct |
| Weather by city | https://api.openweathermap.org/data/2.5/weather |
| 5 day forecast | https://api.openweathermap.org/data/2.5/forecast |
| Accumulated precipitation | https://history.openweathermap.org/data/2.5/history/accumulated_precipitation |

## Authentication
- API key passed as the `appid` query parameter

## Request Parameters
| Parameter | Used by | Description |
|-----------|---------|-------------|
| lat, lon | all but geocoding and weather by city | Coordinates in decimal degrees |
| units | One Call, weather, forecast | standard, metric, imperial |
| lang | One Call, weather, forecast, geocoding | Language for text descriptions |
| dt | timemachine | Unix timestamp (seconds, UTC) |
| date | day_summary | YYYY-MM-DD |
| q, limit | geocoding | City name, max results (always 3) |
| start, end | accumulated | Unix timestamps bounding the period |

## Error Responses
Errors come back as JSON: `{"cod": 401, "message": "Invalid API key..."}`.
The `message` field is surfaced in `ProviderError`.

Day summaries are always requested in metric units and English so that
cached entries keyed by (lat, lon, date) stay comparable.
"""

from __future__ import annotations

from typing import Any

import httpx

from weather_lookup.models.location import Coordinates
from weather_lookup.providers.base import WeatherProvider

DAY_SUMMARY_UNITS = "metric"
DAY_SUMMARY_LANG = "en"
SEARCH_LIMIT = 3


class OpenWeatherProvider(WeatherProvider):
    """OpenWeatherMap client (One Call 3.0 plus geocoding, 2.5 and history).

    Example:
        ```python
        async with OpenWeatherProvider(api_key="your-api-key") as provider:
            current = await provider.get_current_weather(
                Coordinates(latitude=40.7128, longitude=-74.0060)
            )
        ```
    """

    name = "openweather"
    base_url = "https://api.openweathermap.org/data/3.0/onecall"
    geocoding_url = "https://api.openweathermap.org/geo/1.0/direct"
    weather_url = "https://api.openweathermap.org/data/2.5/weather"
    forecast_url = "https://api.openweathermap.org/data/2.5/forecast"
    precipitation_url = (
        "https://history.openweathermap.org/data/2.5/history/accumulated_precipitation"
    )
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the One Call provider.

        Args:
            api_key: OpenWeatherMap API key with One Call 3.0 access
            base_url: Override for the One Call base URL
            user_agent: Optional User-Agent string
            timeout: Request timeout in seconds
            client: Pre-built HTTP client
        """
        super().__init__(
            api_key=api_key,
            user_agent=user_agent,
            timeout=timeout,
            client=client,
        )
        if base_url:
            self.base_url = base_url.rstrip("/")

    def _params(self, **params: Any) -> dict[str, Any]:
        return {**params, "appid": self._require_api_key()}

    def _error_message(self, response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

    async def get_current_weather(
        self,
        coordinates: Coordinates,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        """Get current weather and forecast blocks for a location."""
        return await self._fetch_json(
            self.base_url,
            params=self._params(
                lat=coordinates.latitude,
                lon=coordinates.longitude,
                units=units,
                lang=lang,
            ),
            failure_message="Failed to fetch weather data",
        )

    async def get_historical_weather(
        self,
        coordinates: Coordinates,
        timestamp: int,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        """Get observed weather at a point in time."""
        return await self._fetch_json(
            f"{self.base_url}/timemachine",
            params=self._params(
                lat=coordinates.latitude,
                lon=coordinates.longitude,
                dt=timestamp,
                units=units,
                lang=lang,
            ),
            failure_message="Failed to fetch historical weather data",
        )

    async def fetch_day_summary(
        self,
        latitude: float,
        longitude: float,
        date: str,
    ) -> dict[str, Any]:
        """Get the daily aggregation for one date."""
        return await self._fetch_json(
            f"{self.base_url}/day_summary",
            params=self._params(
                lat=latitude,
                lon=longitude,
                date=date,
                units=DAY_SUMMARY_UNITS,
                lang=DAY_SUMMARY_LANG,
            ),
            failure_message="Failed to fetch daily weather data",
        )

    async def geocode(self, city: str, lang: str = "en") -> list[dict[str, Any]]:
        """Find up to three places matching a city name."""
        return await self._fetch_json(
            self.geocoding_url,
            params=self._params(q=city, limit=SEARCH_LIMIT, lang=lang),
            failure_message="Failed to fetch location data",
        )

    async def get_weather_by_city(self, city: str) -> dict[str, Any]:
        return await self._fetch_json(
            self.weather_url,
            params=self._params(q=city, units="metric", lang="en"),
            failure_message="Failed to fetch weather data",
        )

    async def get_forecast(self, coordinates: Coordinates) -> dict[str, Any]:
        return await self._fetch_json(
            self.forecast_url,
            params=self._params(
                lat=coordinates.latitude,
                lon=coordinates.longitude,
                units="metric",
                lang="en",
            ),
            failure_message="Failed to fetch forecast data",
        )

    async def get_precipitation(
        self,
        coordinates: Coordinates,
        start: int,
        end: int,
    ) -> dict[str, Any]:
        """Get precipitation accumulated between two Unix timestamps."""
        return await self._fetch_json(
            self.precipitation_url,
            params=self._params(
                lat=coordinates.latitude,
                lon=coordinates.longitude,
                start=start,
                end=end,
            ),
            failure_message="Failed to fetch precipitation data",
        )
