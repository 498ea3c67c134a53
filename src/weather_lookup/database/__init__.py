"""Database module for the weather lookup service.

This module provides:
- SQLAlchemy async database connection
- User, favorite and cached-response models
- Store classes wrapping those models for the services and refresh job
"""

from weather_lookup.database.connection import (
    close_db,
    create_tables,
    get_db,
    get_db_session,
    get_session_factory,
    init_db,
)
from weather_lookup.database.models import (
    Base,
    LocationSearch,
    User,
    UserFavorite,
    WeatherDaySummary,
    WeatherOneCall,
)
from weather_lookup.database.stores import (
    SqlCurrentWeatherCache,
    SqlDaySummaryCache,
    SqlFavoritesStore,
    SqlLocationSearchCache,
    StoreUnavailableError,
)

__all__ = [
    # Connection
    "close_db",
    "create_tables",
    "get_db",
    "get_db_session",
    "get_session_factory",
    "init_db",
    # Models
    "Base",
    "LocationSearch",
    "User",
    "UserFavorite",
    "WeatherDaySummary",
    "WeatherOneCall",
    # Stores
    "SqlCurrentWeatherCache",
    "SqlDaySummaryCache",
    "SqlFavoritesStore",
    "SqlLocationSearchCache",
    "StoreUnavailableError",
]
