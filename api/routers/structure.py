"""
Program structure router.

Coach-facing editing of a program's weeks, days and exercise assignments.
Every endpoint is one structural transaction; the assigned client is
notified in the background once it has committed.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_current_actor, get_structural_editor
from api.notifications import ProgramUpdateNotifier
from models.program import (
    Actor,
    Assignment,
    Day,
    DayCreate,
    ExerciseAttachRequest,
    ExerciseUpdateRequest,
    NameUpdate,
    ProgramTree,
    Week,
    WeekCreate,
)
from services.structural_editor import StructuralEditor

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/programs/{program_id}/weeks",
    tags=["Program Structure"],
)


# =============================================================================
# Weeks
# =============================================================================


@router.post("", response_model=Week, status_code=201)
async def add_week(
    program_id: str,
    request: WeekCreate,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Week:
    """
    Append a week, or insert it at ``order``.

    Adding a week to a completed program reactivates it at the new week.

    Raises:
        409: The program already holds total_weeks weeks
    """
    week = editor.add_week(actor, program_id, request.name, request.order)
    notify(program_id, "week_added")
    return week


@router.patch("/{week_id}", response_model=Week)
async def update_week(
    program_id: str,
    week_id: str,
    request: NameUpdate,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
) -> Week:
    return editor.update_week(actor, program_id, week_id, request.name)


@router.delete("/{week_id}", response_model=ProgramTree)
async def remove_week(
    program_id: str,
    week_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> ProgramTree:
    """Remove a week with its days and assignments; remaining weeks are renumbered."""
    program = editor.remove_week(actor, program_id, week_id)
    notify(program_id, "week_removed")
    return program


@router.post("/{week_id}/duplicate", response_model=Week, status_code=201)
async def duplicate_week(
    program_id: str,
    week_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Week:
    """
    Copy a week with its days and assignments directly after the source.

    Raises:
        409: The program already holds total_weeks weeks
    """
    week = editor.duplicate_week(actor, program_id, week_id)
    notify(program_id, "week_added")
    return week


# =============================================================================
# Days
# =============================================================================


@router.post("/{week_id}/days", response_model=Day, status_code=201)
async def add_day(
    program_id: str,
    week_id: str,
    request: DayCreate,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Day:
    """
    Append a day to a week, or insert it at ``order``.

    Raises:
        409: The week already holds the maximum number of days
    """
    day = editor.add_day(actor, program_id, week_id, request.name, request.order)
    notify(program_id, "day_added")
    return day


@router.patch("/{week_id}/days/{day_id}", response_model=Day)
async def update_day(
    program_id: str,
    week_id: str,
    day_id: str,
    request: NameUpdate,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
) -> Day:
    return editor.update_day(actor, program_id, week_id, day_id, request.name)


@router.delete("/{week_id}/days/{day_id}", response_model=Week)
async def remove_day(
    program_id: str,
    week_id: str,
    day_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Week:
    week = editor.remove_day(actor, program_id, week_id, day_id)
    notify(program_id, "day_removed")
    return week


@router.post("/{week_id}/days/{day_id}/duplicate", response_model=Day, status_code=201)
async def duplicate_day(
    program_id: str,
    week_id: str,
    day_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Day:
    day = editor.duplicate_day(actor, program_id, week_id, day_id)
    notify(program_id, "day_added")
    return day


# =============================================================================
# Exercise assignments
# =============================================================================


@router.post("/{week_id}/days/{day_id}/exercises", response_model=Assignment, status_code=201)
async def attach_exercise(
    program_id: str,
    week_id: str,
    day_id: str,
    request: ExerciseAttachRequest,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Assignment:
    """
    Attach a catalog exercise to a day.

    The exercise is taken by ``exercise_id`` or looked up by ``name`` and
    created in the catalog when it does not exist yet.

    Raises:
        422: Invalid sets/reps/time/measurement (the error names the field)
    """
    assignment = editor.attach_exercise(actor, program_id, week_id, day_id, request)
    notify(program_id, "exercise_added")
    return assignment


@router.patch(
    "/{week_id}/days/{day_id}/exercises/{exercise_id}", response_model=Assignment
)
async def update_exercise(
    program_id: str,
    week_id: str,
    day_id: str,
    exercise_id: str,
    request: ExerciseUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Assignment:
    """
    Update an assignment's parameters and the shared catalog entry.

    Name, description and video link changes apply to the catalog
    exercise and are therefore visible in every program using it.
    """
    assignment = editor.update_exercise(
        actor, program_id, week_id, day_id, exercise_id, request
    )
    notify(program_id, "exercise_updated")
    return assignment


@router.delete("/{week_id}/days/{day_id}/exercises/{exercise_id}", response_model=Day)
async def detach_exercise(
    program_id: str,
    week_id: str,
    day_id: str,
    exercise_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> Day:
    day = editor.detach_exercise(actor, program_id, week_id, day_id, exercise_id)
    notify(program_id, "exercise_removed")
    return day
