"""
Exercise catalog router.

The catalog is shared by every program. Coaches add entries here or
implicitly when attaching an exercise by name to a program day.
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.deps import get_current_actor, get_exercise_catalog
from application.exceptions import UnauthorizedError
from models.program import (
    Actor,
    ActorRole,
    Exercise,
    ExerciseCreate,
    ExerciseListResponse,
)
from services.exercise_catalog import ExerciseCatalog

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/exercises",
    tags=["Exercises"],
)


@router.get("", response_model=ExerciseListResponse)
async def list_exercises(
    actor: Actor = Depends(get_current_actor),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
) -> ExerciseListResponse:
    exercises = catalog.list()
    return ExerciseListResponse(exercises=exercises, total=len(exercises))


@router.get("/search", response_model=ExerciseListResponse)
async def search_exercises(
    query: str = Query("", description="Case-insensitive substring of the name"),
    actor: Actor = Depends(get_current_actor),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
) -> ExerciseListResponse:
    exercises = catalog.search(query)
    return ExerciseListResponse(exercises=exercises, total=len(exercises))


@router.post("", response_model=Exercise, status_code=201)
async def create_exercise(
    exercise: ExerciseCreate,
    actor: Actor = Depends(get_current_actor),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
) -> Exercise:
    """
    Add a catalog exercise.

    Names are unique: posting an existing name returns the existing entry.
    """
    if actor.role == ActorRole.CLIENT:
        raise UnauthorizedError("Only coaches and admins add catalog exercises")
    return catalog.get_or_create(
        exercise.name,
        {
            "target_type": exercise.target_type.value,
            "description": exercise.description,
            "video_link": exercise.video_link,
            "created_by": actor.id,
        },
    )
