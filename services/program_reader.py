"""
Read paths for programs.

Every program surfaced here has passed through the position tracker's
read-time repair, so callers never observe a dangling current pointer.
"""

import logging
from typing import List

from application.exceptions import UnauthorizedError
from application.ports import ProgramRepository
from models.program import Actor, ActorRole, ProgramTree
from services.authorization import can_view_program
from services.position_tracker import PositionTracker
from services.program_tree import ProgramTreeStore

logger = logging.getLogger(__name__)


class ProgramReader:
    """Loads programs with their tree and a repaired current position."""

    def __init__(
        self,
        program_repo: ProgramRepository,
        store: ProgramTreeStore,
        tracker: PositionTracker,
    ):
        self._repo = program_repo
        self._store = store
        self._tracker = tracker

    def get_program(self, actor: Actor, program_id: str) -> ProgramTree:
        tree = self._store.load(program_id)
        if not can_view_program(actor, tree):
            raise UnauthorizedError()
        return self._tracker.heal(tree)

    def get_client_programs(self, actor: Actor) -> List[ProgramTree]:
        """Programs assigned to the calling client."""
        rows = self._repo.get_by_client(actor.id)
        logger.info(f"Loading {len(rows)} program(s) for client {actor.id}")
        return [self._tracker.heal(self._store.load(row["id"])) for row in rows]

    def get_coach_programs(self, actor: Actor) -> List[ProgramTree]:
        """Programs authored by the calling coach."""
        if actor.role not in (ActorRole.COACH, ActorRole.ADMIN):
            raise UnauthorizedError("Only coaches and admins list authored programs")
        rows = self._repo.get_by_coach(actor.id)
        return [self._tracker.heal(self._store.load(row["id"])) for row in rows]
