"""Domain models for the weather lookup service."""

from weather_lookup.models.location import Coordinates, FavoriteLocation
from weather_lookup.models.refresh import (
    LocationOutcome,
    OutcomeStatus,
    RunResult,
)

__all__ = [
    # Location
    "Coordinates",
    "FavoriteLocation",
    # Refresh job
    "LocationOutcome",
    "OutcomeStatus",
    "RunResult",
]
