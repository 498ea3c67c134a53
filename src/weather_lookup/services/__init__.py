"""Application services."""

from weather_lookup.services.lookup import LookupService
from weather_lookup.services.onecall import OneCallService, date_to_timestamp

__all__ = ["LookupService", "OneCallService", "date_to_timestamp"]
