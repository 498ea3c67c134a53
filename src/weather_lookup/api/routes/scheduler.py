"""Scheduler trigger route.

An external cron (platform scheduler, GitHub Action, curl in crontab) hits
`GET /cron/scheduler` to run the favorites refresh job once.

- 200: the run completed, even if some or all locations failed
- 200: nothing to do (no favorites stored)
- 500: the favorites could not be listed, no partial result
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from weather_lookup.api.dependencies import get_refresh_job, verify_cron_secret
from weather_lookup.jobs.favorites_refresh import FatalRunError, FavoritesRefreshJob

router = APIRouter()

COMPLETED_MESSAGE = "Scheduled check completed"
EMPTY_MESSAGE = "No favorite locations to process"


class LocationDetail(BaseModel):
    """One location's outcome."""

    location: str | None
    status: str
    data: Any = None
    error: str | None = None


class RunSummary(BaseModel):
    """Aggregate counts plus per-location details."""

    total: int
    successes: int
    errors: int
    details: list[LocationDetail]


class SchedulerResponse(BaseModel):
    """Scheduler trigger response."""

    message: str
    summary: RunSummary


@router.get(
    "/scheduler",
    response_model=SchedulerResponse,
    response_model_exclude_unset=True,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_scheduler(
    job: FavoritesRefreshJob = Depends(get_refresh_job),
) -> SchedulerResponse:
    """Run the favorites refresh job once and report the outcome."""
    try:
        result = await job.run()
    except FatalRunError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during scheduled check",
        )

    message = COMPLETED_MESSAGE if result.processed else EMPTY_MESSAGE
    return SchedulerResponse.model_validate({"message": message, "summary": result.summary()})
