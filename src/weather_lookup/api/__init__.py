"""FastAPI application and routes.

This module provides the REST API for the weather lookup service.

## API Structure

- /api/onecall, /api/onecalltimemachine, /api/onecalldaysummary,
  /api/onecallmonthsummary - One Call lookups
- /api/search, /api/weather, /api/forecast, /api/precipitations - City search
  and quick lookups
- /api/favorites - Favorite locations of the logged-in user
- /cron/scheduler - Favorites refresh trigger for an external scheduler
- /health - Liveness check

## Authentication

Favorites routes require the session cookie set by the account service.
Weather lookups are public. The scheduler trigger can be guarded by a
shared secret header (CRON_SECRET).
"""

from weather_lookup.api.app import create_app

__all__ = ["create_app"]
