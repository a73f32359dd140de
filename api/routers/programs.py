"""
Programs router.

This router provides endpoints for managing coached training programs:
- Create programs (coach/admin)
- List a coach's authored programs and a client's assigned programs
- Get program details (full week/day/exercise tree)
- Update title, description, status and completed weeks
- Change the week capacity
- Delete programs with their whole tree and progress logs

Reads always return a repaired current week/day pointer.
"""

import logging

from fastapi import APIRouter, Depends, Response

from api.deps import get_current_actor, get_program_reader, get_structural_editor
from api.notifications import ProgramUpdateNotifier
from models.program import (
    Actor,
    ProgramCreate,
    ProgramListResponse,
    ProgramTree,
    ProgramUpdateRequest,
    TotalWeeksRequest,
)
from services.program_reader import ProgramReader
from services.structural_editor import StructuralEditor

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/programs",
    tags=["Programs"],
)


# =============================================================================
# Create Program
# =============================================================================


@router.post("", response_model=ProgramTree, status_code=201)
async def create_program(
    program: ProgramCreate,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
) -> ProgramTree:
    """
    Create an empty program authored by the calling coach.

    Args:
        program: Title, description, optional client and week capacity

    Returns:
        The created program (no weeks yet)
    """
    logger.info(f"Creating program '{program.title}' for coach {actor.id}")
    return editor.create_program(actor, program)


# =============================================================================
# List Programs
# =============================================================================


@router.get("/coach", response_model=ProgramListResponse)
async def list_coach_programs(
    actor: Actor = Depends(get_current_actor),
    reader: ProgramReader = Depends(get_program_reader),
) -> ProgramListResponse:
    """List programs authored by the calling coach."""
    programs = reader.get_coach_programs(actor)
    return ProgramListResponse(programs=programs, total=len(programs))


@router.get("/client", response_model=ProgramListResponse)
async def list_client_programs(
    actor: Actor = Depends(get_current_actor),
    reader: ProgramReader = Depends(get_program_reader),
) -> ProgramListResponse:
    """
    List programs assigned to the calling client.

    Stale current week/day pointers are repaired before they are returned.
    """
    programs = reader.get_client_programs(actor)
    return ProgramListResponse(programs=programs, total=len(programs))


# =============================================================================
# Get / Update / Delete Program
# =============================================================================


@router.get("/{program_id}", response_model=ProgramTree)
async def get_program(
    program_id: str,
    actor: Actor = Depends(get_current_actor),
    reader: ProgramReader = Depends(get_program_reader),
) -> ProgramTree:
    """
    Get a program with its full tree.

    Raises:
        404: Program not found
        403: Actor is neither the owning coach, the assigned client nor an admin
    """
    return reader.get_program(actor, program_id)


@router.patch("/{program_id}", response_model=ProgramTree)
async def update_program(
    program_id: str,
    update: ProgramUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
    notify: ProgramUpdateNotifier = Depends(),
) -> ProgramTree:
    """
    Update title, description, status or completed weeks.

    Raises:
        422: completed_weeks exceeds total_weeks
    """
    logger.info(f"Updating program {program_id} by {actor.id}")
    program = editor.update_program(actor, program_id, update)
    notify(program_id, "program_updated")
    return program


@router.put("/{program_id}/total-weeks", response_model=ProgramTree)
async def set_total_weeks(
    program_id: str,
    request: TotalWeeksRequest,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
) -> ProgramTree:
    """
    Change the program's week capacity.

    Raises:
        409: Requested capacity is below the current number of weeks
        422: Requested capacity is outside 1..52
    """
    return editor.set_total_weeks(actor, program_id, request.total_weeks)


@router.delete("/{program_id}", status_code=204)
async def delete_program(
    program_id: str,
    actor: Actor = Depends(get_current_actor),
    editor: StructuralEditor = Depends(get_structural_editor),
) -> Response:
    """Delete a program, its weeks, days, assignments and progress logs."""
    logger.info(f"Deleting program {program_id} by {actor.id}")
    editor.delete_program(actor, program_id)
    return Response(status_code=204)
