"""Location models for the weather lookup service."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """Geographic coordinates (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        """Return coordinates as (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class FavoriteLocation:
    """A stored favorite as seen by the refresh job.

    This is a plain record, not a validated model: rows are handed over as
    the store returns them, and a bad coordinate only surfaces once that
    location is processed.
    """

    latitude: float
    longitude: float
    location_name: str

    @property
    def key(self) -> tuple[float, float]:
        """Deduplication key (exact coordinate match, no rounding)."""
        return (self.latitude, self.longitude)

    def coordinates(self) -> Coordinates:
        """Validate and return the coordinates.

        Raises:
            ValueError: If either coordinate is missing or out of range
        """
        return Coordinates(latitude=self.latitude, longitude=self.longitude)
