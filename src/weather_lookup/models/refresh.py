"""Result models for the favorites refresh job."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class OutcomeStatus(str, Enum):
    """Per-location outcome of a refresh run."""

    SUCCESS = "success"
    ERROR = "error"


class LocationOutcome(BaseModel):
    """What happened to one deduplicated location during a run."""

    location: str | None = Field(..., description="Display name of the favorite")
    status: OutcomeStatus
    data: Any = Field(default=None, description="Day summary payload on success")
    error: str | None = Field(default=None, description="Error message on failure")

    @classmethod
    def success(cls, location: str | None, data: Any) -> LocationOutcome:
        return cls(location=location, status=OutcomeStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, location: str | None, error: str) -> LocationOutcome:
        return cls(location=location, status=OutcomeStatus.ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Serialize, keeping only `data` or `error` depending on status."""
        payload: dict[str, Any] = {
            "location": self.location,
            "status": self.status.value,
        }
        if self.ok:
            payload["data"] = self.data
        else:
            payload["error"] = self.error
        return payload


class RunResult(BaseModel):
    """Aggregate result of one refresh run.

    `processed` is False only for the empty-input short circuit, so a run
    with nothing to do can be told apart from a run where every location
    failed.
    """

    total: int = 0
    successes: int = 0
    errors: int = 0
    details: list[LocationOutcome] = Field(default_factory=list)
    date: str | None = Field(default=None, description="Reference date (YYYY-MM-DD)")
    processed: bool = True

    @classmethod
    def empty(cls) -> RunResult:
        """Result for a run that found no favorites."""
        return cls(processed=False)

    @classmethod
    def from_outcomes(cls, outcomes: list[LocationOutcome], date: str) -> RunResult:
        successes = sum(1 for outcome in outcomes if outcome.ok)
        return cls(
            total=len(outcomes),
            successes=successes,
            errors=len(outcomes) - successes,
            details=outcomes,
            date=date,
        )

    def summary(self) -> dict[str, Any]:
        """The `summary` object returned to the scheduler caller."""
        return {
            "total": self.total,
            "successes": self.successes,
            "errors": self.errors,
            "details": [outcome.to_dict() for outcome in self.details],
        }
