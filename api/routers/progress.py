"""
Progress router.

Client-facing endpoints for executing a program:
- Advance the current position after finishing a day
- Log completed sets and rest days
- Edit or delete own logs
- Summarize progress by week, day occurrence and exercise
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from api.deps import get_current_actor, get_progress_aggregator, get_progress_recorder
from models.program import (
    Actor,
    AdvanceRequest,
    PositionResponse,
    ProgressLog,
    ProgressLogCreate,
    ProgressLogListResponse,
    ProgressLogUpdate,
)
from models.progress import ProgressSummary
from services.progress_aggregator import ProgressAggregator
from services.progress_recorder import ProgressRecorder

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Progress"],
)


# =============================================================================
# Position
# =============================================================================


@router.post("/programs/{program_id}/position/advance", response_model=PositionResponse)
async def advance_position(
    program_id: str,
    request: AdvanceRequest,
    actor: Actor = Depends(get_current_actor),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
) -> PositionResponse:
    """
    Mark a day as finished and move to the next one.

    Moves to the next day of the week, else the first day of the next week,
    else completes the program.

    Raises:
        403: Actor is not the assigned client
        422: Program is not active
    """
    program = recorder.complete_day(actor, program_id, request.day_id)
    return PositionResponse(
        program_id=program.id,
        status=program.status,
        current_week_id=program.current_week_id,
        current_day_id=program.current_day_id,
        completed_weeks=program.completed_weeks,
    )


# =============================================================================
# Progress logs
# =============================================================================


@router.post("/programs/{program_id}/logs", response_model=ProgressLog, status_code=201)
async def create_log(
    program_id: str,
    payload: ProgressLogCreate,
    actor: Actor = Depends(get_current_actor),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
) -> ProgressLog:
    """
    Log one completed set, or a rest day.

    Raises:
        409: Week/day not part of this program, or rest day already logged
        422: exercise_id missing on a non-rest log
    """
    return recorder.record(actor, program_id, payload)


@router.get("/programs/{program_id}/logs", response_model=ProgressLogListResponse)
async def list_logs(
    program_id: str,
    day_id: Optional[str] = Query(None, description="Only logs of this program day"),
    actor: Actor = Depends(get_current_actor),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
) -> ProgressLogListResponse:
    logs = recorder.list_logs(actor, program_id, day_id=day_id)
    return ProgressLogListResponse(logs=logs, total=len(logs))


@router.patch("/logs/{log_id}", response_model=ProgressLog)
async def update_log(
    log_id: str,
    update: ProgressLogUpdate,
    actor: Actor = Depends(get_current_actor),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
) -> ProgressLog:
    return recorder.update(actor, log_id, update)


@router.delete("/logs/{log_id}", status_code=204)
async def delete_log(
    log_id: str,
    actor: Actor = Depends(get_current_actor),
    recorder: ProgressRecorder = Depends(get_progress_recorder),
) -> Response:
    recorder.delete(actor, log_id)
    return Response(status_code=204)


# =============================================================================
# Summary
# =============================================================================


@router.get("/programs/{program_id}/progress", response_model=ProgressSummary)
async def get_progress(
    program_id: str,
    week_id: Optional[str] = Query(None, description="Restrict to one week"),
    user_id: Optional[str] = Query(None, description="Logging user (coaches and admins)"),
    actor: Actor = Depends(get_current_actor),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> ProgressSummary:
    """
    Summarize logged progress.

    Groups logs by week, then by day and completion date, then by exercise.
    Averages only consider sets where the value was logged.
    """
    return aggregator.summarize(actor, program_id, week_id=week_id, user_id=user_id)
