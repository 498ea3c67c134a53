"""Base weather provider abstraction.

This module defines the interface for upstream weather APIs and the error
types they raise. Unlike a forecasting app, this service does not translate
responses into a canonical model: payloads are opaque JSON that is cached and
handed to the browser as-is.

## Error Taxonomy

- `ProviderError`: any upstream failure. `status_code` is set when the
  upstream answered with a non-2xx response, None for network failures.
- `RateLimitError`: HTTP 429, with `retry_after` when the header is present.
- `AuthenticationError`: missing or rejected API key.

`ProviderError.describe()` renders the message shown to API callers and
recorded in refresh job reports:

- `API Error: 404 - city not found` (upstream responded)
- `Error: Connection refused` (no response)

## Retries

Transport-level failures (timeouts, connection errors) are retried up to
three times with exponential backoff. HTTP error responses are never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from weather_lookup.models.location import Coordinates


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body

    def describe(self) -> str:
        """Caller-facing description of the failure."""
        if self.status_code is not None:
            return f"API Error: {self.status_code} - {self.message}"
        return f"Error: {self.message}"


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    pass


class WeatherProvider(ABC):
    """Abstract base class for upstream weather APIs.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key

    Example:
        ```python
        async with OpenWeatherProvider(api_key="...") as provider:
            summary = await provider.fetch_day_summary(48.85, 2.35, "2025-03-28")
        ```
    """

    name: str
    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (the provider will not close it)
        """
        self.api_key = api_key
        self.user_agent = user_agent or "weather-lookup/0.1.0"
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> WeatherProvider:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _require_api_key(self) -> str:
        if self.requires_api_key and not self.api_key:
            raise AuthenticationError(
                f"API key required for {self.name}",
                provider=self.name,
            )
        return self.api_key or ""

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
    ) -> httpx.Response:
        return await self._get_client().get(url, params=params, headers=headers)

    async def _fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        failure_message: str = "Failed to fetch weather data",
    ) -> Any:
        """Fetch and decode a JSON document.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers
            failure_message: Message used when the upstream gives no reason

        Returns:
            Decoded JSON body

        Raises:
            ProviderError: If the request fails or the body is not JSON
            RateLimitError: If rate limit is exceeded
            AuthenticationError: If the upstream rejects the credentials
        """
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await self._get(url, params, request_headers)
        except httpx.HTTPError as e:
            raise ProviderError(str(e) or type(e).__name__, provider=self.name) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code >= 400:
            message = self._error_message(response) or failure_message
            error_cls = AuthenticationError if response.status_code == 401 else ProviderError
            raise error_cls(
                message,
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e

    def _error_message(self, response: httpx.Response) -> str | None:
        """Extract the upstream's own error message, if it sent one."""
        return None

    @abstractmethod
    async def get_current_weather(
        self,
        coordinates: Coordinates,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        """Get current conditions plus short-range forecast for a location."""
        pass

    @abstractmethod
    async def get_historical_weather(
        self,
        coordinates: Coordinates,
        timestamp: int,
        units: str = "metric",
        lang: str = "en",
    ) -> dict[str, Any]:
        """Get observed weather at a Unix timestamp."""
        pass

    @abstractmethod
    async def fetch_day_summary(
        self,
        latitude: float,
        longitude: float,
        date: str,
    ) -> dict[str, Any]:
        """Get aggregated weather for one calendar date (YYYY-MM-DD)."""
        pass

    @abstractmethod
    async def geocode(self, city: str, lang: str = "en") -> list[dict[str, Any]]:
        """Resolve a city name to candidate locations."""
        pass

    @abstractmethod
    async def get_weather_by_city(self, city: str) -> dict[str, Any]:
        """Get current conditions for a city name."""
        pass

    @abstractmethod
    async def get_forecast(self, coordinates: Coordinates) -> dict[str, Any]:
        """Get the multi-day forecast for a location."""
        pass

    @abstractmethod
    async def get_precipitation(
        self,
        coordinates: Coordinates,
        start: int,
        end: int,
    ) -> dict[str, Any]:
        """Get precipitation accumulated between two Unix timestamps."""
        pass
