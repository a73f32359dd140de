"""
Progress log recording.

Clients append one log per completed set (or one per rest day) while
executing a program day. Logs are facts: structural edits never rewrite
them and recording a log never moves the current position. A client
moves forward explicitly with complete_day().
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from application.exceptions import (
    DuplicateLogError,
    InvalidInputError,
    NotFoundError,
    StructuralMismatchError,
    UnauthorizedError,
)
from application.ports import ExerciseRepository, ProgressLogRepository
from models.program import (
    Actor,
    ActorRole,
    ProgramTree,
    ProgressLog,
    ProgressLogCreate,
    ProgressLogUpdate,
)
from services.authorization import can_train_program, can_view_program
from services.position_tracker import PositionTracker
from services.program_tree import ProgramTreeStore

logger = logging.getLogger(__name__)


class ProgressRecorder:
    """Validates and stores client progress logs."""

    def __init__(
        self,
        store: ProgramTreeStore,
        tracker: PositionTracker,
        log_repo: ProgressLogRepository,
        exercise_repo: ExerciseRepository,
    ):
        self._store = store
        self._tracker = tracker
        self._log_repo = log_repo
        self._exercise_repo = exercise_repo

    def record(self, actor: Actor, program_id: str, payload: ProgressLogCreate) -> ProgressLog:
        """
        Append a progress log for the assigned client.

        Raises:
            UnauthorizedError: If the actor is not the program's client
            StructuralMismatchError: If week/day are not part of this program
            InvalidInputError: If a non-rest log has no exercise
            DuplicateLogError: If a rest day was already logged that day
        """
        tree = self._store.load(program_id)
        if tree.client_id != actor.id:
            raise UnauthorizedError("Only the assigned client may log progress")

        self._check_membership(tree, payload.week_id, payload.day_id)

        if payload.is_rest_day:
            self._reject_duplicate_rest_day(program_id, actor.id, payload)
        else:
            if not payload.exercise_id:
                raise InvalidInputError(
                    "exercise_id", "exercise_id is required unless is_rest_day is set"
                )
            if not self._exercise_repo.get_by_id(payload.exercise_id):
                raise NotFoundError("Exercise", payload.exercise_id)

        data = payload.model_dump(mode="json")
        if payload.is_rest_day:
            data["exercise_id"] = None
        now = datetime.now(timezone.utc).isoformat()
        created = self._log_repo.create(
            {
                **data,
                "id": str(uuid4()),
                "program_id": program_id,
                "user_id": actor.id,
                "created_at": now,
            }
        )
        logger.info(
            f"Recorded progress log {created['id']} for program {program_id} "
            f"(day={payload.day_id}, rest_day={payload.is_rest_day})"
        )
        return ProgressLog(**created)

    def list_logs(
        self,
        actor: Actor,
        program_id: str,
        day_id: Optional[str] = None,
    ) -> List[ProgressLog]:
        """Logs visible to the actor: clients see their own, coaches and admins see all."""
        tree = self._store.load(program_id)
        if not can_view_program(actor, tree):
            raise UnauthorizedError()
        user_id = actor.id if actor.role == ActorRole.CLIENT else None
        rows = self._log_repo.list_for_program(program_id, user_id=user_id, day_id=day_id)
        return [ProgressLog(**row) for row in rows]

    def update(self, actor: Actor, log_id: str, update: ProgressLogUpdate) -> ProgressLog:
        log = self._get_owned(actor, log_id)
        values = update.model_dump(mode="json", exclude_none=True)
        if not values:
            return log
        return ProgressLog(**self._log_repo.update(log_id, values))

    def delete(self, actor: Actor, log_id: str) -> None:
        self._get_owned(actor, log_id)
        self._log_repo.delete(log_id)
        logger.info(f"Deleted progress log {log_id}")

    def complete_day(self, actor: Actor, program_id: str, day_id: str) -> ProgramTree:
        """
        Advance the current position past a finished day.

        Only the day the (healed) pointer is on can be finished; days are
        completed in order.
        """
        with self._store.transaction(actor, program_id, authorize=can_train_program) as txn:
            found = txn.tree.find_day(day_id)
            if found is None:
                raise NotFoundError("Day", day_id)
            _, current_day_id = self._tracker.resolve(txn.tree)
            if day_id != current_day_id:
                raise InvalidInputError(
                    "day_id", f"Day {day_id} is not the current day of program {program_id}"
                )
            week, day = found
            self._tracker.advance(txn, week, day)
        return txn.tree

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_owned(self, actor: Actor, log_id: str) -> ProgressLog:
        row = self._log_repo.get_by_id(log_id)
        if not row:
            raise NotFoundError("ProgressLog", log_id)
        log = ProgressLog(**row)
        if actor.role != ActorRole.ADMIN and log.user_id != actor.id:
            raise UnauthorizedError()
        return log

    @staticmethod
    def _check_membership(tree: ProgramTree, week_id: str, day_id: str) -> None:
        week = tree.find_week(week_id)
        if week is None:
            raise StructuralMismatchError(
                f"Week {week_id} does not belong to program {tree.id}"
            )
        if not any(d.id == day_id for d in week.days):
            raise StructuralMismatchError(f"Day {day_id} does not belong to week {week_id}")

    def _reject_duplicate_rest_day(
        self, program_id: str, user_id: str, payload: ProgressLogCreate
    ) -> None:
        logged_on = payload.completed_at.date()
        for row in self._log_repo.list_for_program(
            program_id, user_id=user_id, day_id=payload.day_id
        ):
            existing = ProgressLog(**row)
            if existing.is_rest_day and existing.completed_at.date() == logged_on:
                logger.warning(
                    f"Duplicate rest day log for program {program_id}, day {payload.day_id}"
                )
                raise DuplicateLogError(
                    "Rest day already logged for this day", log_id=existing.id
                )
