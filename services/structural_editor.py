"""
Structural editor.

Orchestrates coach-facing edits of a program tree. Each public method is
one transaction: authorization, membership and capacity checks run
first, the tree store stages the mutation, siblings are resequenced, the
position tracker repairs the current pointer, and the change set is
committed as a whole. Any failure leaves the store untouched.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from application.exceptions import InvalidInputError
from application.ports import ProgressLogRepository
from core.constants import ASSIGNMENTS_TABLE, COPY_SUFFIX, DAYS_TABLE, WEEKS_TABLE
from models.program import (
    Actor,
    Assignment,
    Day,
    ExerciseAttachRequest,
    ExerciseUpdateRequest,
    ProgramCreate,
    ProgramStatus,
    ProgramTree,
    ProgramUpdateRequest,
    TargetType,
    Week,
)
from services.exercise_catalog import EDITABLE_FIELDS, ExerciseCatalog
from services.ordering import next_order, rank, sort_siblings
from services.position_tracker import PositionTracker
from services.program_tree import (
    ProgramTransaction,
    ProgramTreeStore,
    validate_assignment_params,
)

logger = logging.getLogger(__name__)

ASSIGNMENT_PARAM_FIELDS = (
    "sets",
    "reps",
    "time_seconds",
    "measurement_type",
    "measurement_value",
)


class StructuralEditor:
    """Add, update, remove and duplicate weeks, days and exercise assignments."""

    def __init__(
        self,
        store: ProgramTreeStore,
        catalog: ExerciseCatalog,
        tracker: PositionTracker,
        progress_log_repo: Optional[ProgressLogRepository] = None,
    ):
        self._store = store
        self._catalog = catalog
        self._tracker = tracker
        self._log_repo = progress_log_repo

    # -------------------------------------------------------------------------
    # Programs
    # -------------------------------------------------------------------------

    def create_program(self, actor: Actor, data: ProgramCreate) -> ProgramTree:
        program = self._store.create_program(actor, data)
        logger.info(f"Created program {program.id} for coach {actor.id}")
        return program

    def update_program(
        self, actor: Actor, program_id: str, update: ProgramUpdateRequest
    ) -> ProgramTree:
        with self._store.transaction(actor, program_id) as txn:
            self._store.update_program(txn, update)
        return txn.tree

    def delete_program(self, actor: Actor, program_id: str) -> None:
        with self._store.transaction(actor, program_id) as txn:
            log_ids = []
            if self._log_repo is not None:
                log_ids = [log["id"] for log in self._log_repo.list_for_program(program_id)]
            self._store.delete_program(txn, log_ids)
        logger.info(f"Deleted program {program_id}")

    def set_total_weeks(self, actor: Actor, program_id: str, total_weeks: int) -> ProgramTree:
        with self._store.transaction(actor, program_id) as txn:
            self._store.set_total_weeks(txn, total_weeks)
        logger.info(f"Program {program_id} capacity set to {total_weeks} weeks")
        return txn.tree

    # -------------------------------------------------------------------------
    # Weeks
    # -------------------------------------------------------------------------

    def add_week(
        self, actor: Actor, program_id: str, name: str, order: Optional[int] = None
    ) -> Week:
        with self._store.transaction(actor, program_id) as txn:
            reactivating = txn.tree.status == ProgramStatus.COMPLETED
            week = self._store.add_week(txn, name, order)
            if reactivating:
                self._tracker.reactivate(txn, week)
            self._tracker.revalidate(txn)
        logger.info(f"Added week {week.id} to program {program_id} at order {week.order}")
        return week

    def update_week(self, actor: Actor, program_id: str, week_id: str, name: str) -> Week:
        with self._store.transaction(actor, program_id) as txn:
            week = self._store.resolve_week(txn, week_id)
            self._store.rename_week(txn, week, name)
        return week

    def remove_week(self, actor: Actor, program_id: str, week_id: str) -> ProgramTree:
        with self._store.transaction(actor, program_id) as txn:
            week = self._store.resolve_week(txn, week_id)
            self._store.remove_week(txn, week)
            self._tracker.revalidate(txn)
        logger.info(f"Removed week {week_id} from program {program_id}")
        return txn.tree

    def duplicate_week(self, actor: Actor, program_id: str, week_id: str) -> Week:
        """
        Deep-copy a week with its days and assignments right after the source.

        Copied assignments keep referencing the same catalog exercises.
        The week capacity check applies to the copy.
        """
        with self._store.transaction(actor, program_id) as txn:
            tree = txn.tree
            source = self._store.resolve_week(txn, week_id)
            self._store.ensure_week_capacity(tree)
            position = rank(tree.weeks, source) + 1

            now = datetime.now(timezone.utc)
            copy = Week(
                id=str(uuid4()),
                program_id=tree.id,
                name=f"{source.name}{COPY_SUFFIX}",
                order=next_order(tree.weeks),
                created_at=now,
            )
            tree.weeks.append(copy)
            txn.insert(WEEKS_TABLE, copy)
            for order, day in enumerate(sort_siblings(source.days), start=1):
                self._copy_day(txn, day, copy, day.name, order, now)

            self._store.reorder(txn, WEEKS_TABLE, tree.weeks, copy, position)
            self._tracker.revalidate(txn)
        logger.info(f"Duplicated week {week_id} as {copy.id} in program {program_id}")
        return copy

    # -------------------------------------------------------------------------
    # Days
    # -------------------------------------------------------------------------

    def add_day(
        self,
        actor: Actor,
        program_id: str,
        week_id: str,
        name: str,
        order: Optional[int] = None,
    ) -> Day:
        with self._store.transaction(actor, program_id) as txn:
            week = self._store.resolve_week(txn, week_id)
            day = self._store.add_day(txn, week, name, order)
            self._tracker.revalidate(txn)
        logger.info(f"Added day {day.id} to week {week_id} at order {day.order}")
        return day

    def update_day(
        self, actor: Actor, program_id: str, week_id: str, day_id: str, name: str
    ) -> Day:
        with self._store.transaction(actor, program_id) as txn:
            day = self._store.resolve_day(txn, week_id, day_id)
            self._store.rename_day(txn, day, name)
        return day

    def remove_day(self, actor: Actor, program_id: str, week_id: str, day_id: str) -> Week:
        with self._store.transaction(actor, program_id) as txn:
            day = self._store.resolve_day(txn, week_id, day_id)
            week = self._store.resolve_week(txn, week_id)
            self._store.remove_day(txn, week, day)
            self._tracker.revalidate(txn)
        logger.info(f"Removed day {day_id} from week {week_id}")
        return week

    def duplicate_day(self, actor: Actor, program_id: str, week_id: str, day_id: str) -> Day:
        """Copy a day and its assignments right after the source, in the same week."""
        with self._store.transaction(actor, program_id) as txn:
            source = self._store.resolve_day(txn, week_id, day_id)
            week = self._store.resolve_week(txn, week_id)
            self._store.ensure_day_capacity(week)
            position = rank(week.days, source) + 1

            copy = self._copy_day(
                txn,
                source,
                week,
                f"{source.name}{COPY_SUFFIX}",
                next_order(week.days),
                datetime.now(timezone.utc),
            )
            self._store.reorder(txn, DAYS_TABLE, week.days, copy, position)
            self._tracker.revalidate(txn)
        logger.info(f"Duplicated day {day_id} as {copy.id} in week {week_id}")
        return copy

    # -------------------------------------------------------------------------
    # Exercise assignments
    # -------------------------------------------------------------------------

    def attach_exercise(
        self,
        actor: Actor,
        program_id: str,
        week_id: str,
        day_id: str,
        request: ExerciseAttachRequest,
    ) -> Assignment:
        with self._store.transaction(actor, program_id) as txn:
            day = self._store.resolve_day(txn, week_id, day_id)
            # Reject bad parameters before a catalog entry may be created
            validate_assignment_params(request)

            if request.exercise_id:
                exercise = self._catalog.get(request.exercise_id)
            elif request.name:
                target_type = request.target_type or (
                    TargetType.TIME if request.time_seconds is not None else TargetType.REPS
                )
                exercise = self._catalog.get_or_create(
                    request.name,
                    {
                        "target_type": target_type.value,
                        "description": request.description,
                        "video_link": request.video_link,
                        "created_by": actor.id,
                    },
                )
            else:
                raise InvalidInputError(
                    "exercise_id", "Either exercise_id or name is required"
                )

            assignment = self._store.attach_exercise(txn, day, exercise.id, request)
        logger.info(f"Attached exercise {exercise.id} to day {day_id}")
        return assignment

    def update_exercise(
        self,
        actor: Actor,
        program_id: str,
        week_id: str,
        day_id: str,
        exercise_id: str,
        request: ExerciseUpdateRequest,
    ) -> Assignment:
        """
        Update an assignment's parameters and, optionally, the shared catalog entry.

        Catalog edits are visible in every program that uses the exercise.
        The catalog target_type only seeds new assignments created by name;
        switching this assignment between reps and time leaves it unchanged.
        """
        provided = request.model_dump(exclude_none=True)
        with self._store.transaction(actor, program_id) as txn:
            day = self._store.resolve_day(txn, week_id, day_id)
            assignment = self._store.find_assignment(day, exercise_id)
            if any(field in provided for field in ASSIGNMENT_PARAM_FIELDS):
                assignment = self._store.update_assignment(txn, day, exercise_id, request)
            catalog_fields = {k: v for k, v in provided.items() if k in EDITABLE_FIELDS}
            if catalog_fields:
                self._catalog.update(exercise_id, catalog_fields, txn=txn)
        return assignment

    def detach_exercise(
        self, actor: Actor, program_id: str, week_id: str, day_id: str, exercise_id: str
    ) -> Day:
        with self._store.transaction(actor, program_id) as txn:
            day = self._store.resolve_day(txn, week_id, day_id)
            self._store.detach_exercise(txn, day, exercise_id)
        logger.info(f"Detached exercise {exercise_id} from day {day_id}")
        return day

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _copy_day(
        self,
        txn: ProgramTransaction,
        source: Day,
        week: Week,
        name: str,
        order: int,
        now: datetime,
    ) -> Day:
        day = Day(id=str(uuid4()), week_id=week.id, name=name, order=order, created_at=now)
        week.days.append(day)
        txn.insert(DAYS_TABLE, day)
        for assignment in source.assignments:
            copied = assignment.model_copy(
                update={"id": str(uuid4()), "program_day_id": day.id, "created_at": now},
                deep=True,
            )
            day.assignments.append(copied)
            txn.insert(ASSIGNMENTS_TABLE, copied)
        return day
