"""Upstream weather data providers."""

from weather_lookup.providers.base import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    WeatherProvider,
)
from weather_lookup.providers.openweather import OpenWeatherProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "OpenWeatherProvider",
]
