"""
Program tree store.

Owns the Program -> Week -> Day -> Assignment hierarchy. All writes go
through a ProgramTransaction: operations mutate the in-memory tree and
are collected into a single change set that the repository commits
atomically. Checks (authorization, capacity, membership, assignment
schema) run before anything is staged, and nothing is written unless
the whole block succeeds.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from uuid import uuid4

from application.exceptions import (
    BelowCurrentCountError,
    CapacityExceededError,
    InvalidAssignmentError,
    InvalidInputError,
    NotFoundError,
    StructuralMismatchError,
    UnauthorizedError,
)
from application.ports import ProgramRepository
from core.constants import (
    ASSIGNMENTS_TABLE,
    DAYS_TABLE,
    MAX_DAYS_PER_WEEK,
    MAX_TOTAL_WEEKS,
    MIN_TOTAL_WEEKS,
    PROGRAMS_TABLE,
    PROGRESS_LOGS_TABLE,
    WEEKS_TABLE,
)
from models.program import (
    Actor,
    ActorRole,
    Assignment,
    AssignmentParams,
    Day,
    MeasurementType,
    ProgramCreate,
    ProgramStatus,
    ProgramTree,
    ProgramUpdateRequest,
    RepsTarget,
    RpeMeasurement,
    TimeTarget,
    Week,
    WeightMeasurement,
)
from services.authorization import ProgramPredicate, can_edit_program
from services.ordering import next_order, place, resequence

logger = logging.getLogger(__name__)

TreeNode = Union[ProgramTree, Week, Day, Assignment]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def build_tree(data: Dict[str, Any]) -> ProgramTree:
    """Convert a nested repository dictionary into a ProgramTree."""
    weeks = []
    for week_data in data.get("weeks", []):
        days = []
        for day_data in week_data.get("days", []):
            assignments = [
                Assignment.from_row(row) for row in day_data.get("exercises", [])
            ]
            day_fields = {k: v for k, v in day_data.items() if k != "exercises"}
            days.append(Day(**day_fields, assignments=assignments))
        week_fields = {k: v for k, v in week_data.items() if k != "days"}
        weeks.append(Week(**week_fields, days=days))
    program_fields = {k: v for k, v in data.items() if k != "weeks"}
    return ProgramTree(**program_fields, weeks=weeks)


# =============================================================================
# Assignment validation
# =============================================================================


def validate_assignment_params(
    params: AssignmentParams,
    existing: Optional[Assignment] = None,
) -> Tuple[int, Union[RepsTarget, TimeTarget], Union[RpeMeasurement, WeightMeasurement]]:
    """
    Turn raw assignment parameters into a validated (sets, target, measurement).

    When ``existing`` is given, omitted fields keep their current values,
    which is how partial updates are expressed.

    Raises:
        InvalidAssignmentError: naming the first offending field
    """
    sets = params.sets if params.sets is not None else (existing.sets if existing else None)
    if sets is None or sets < 1:
        raise InvalidAssignmentError("sets", "sets must be at least 1")

    if params.reps is not None and params.time_seconds is not None:
        raise InvalidAssignmentError(
            "time_seconds", "reps and time_seconds are mutually exclusive"
        )
    if params.reps is not None:
        if params.reps < 1:
            raise InvalidAssignmentError("reps", "reps must be at least 1")
        target: Union[RepsTarget, TimeTarget] = RepsTarget(reps=params.reps)
    elif params.time_seconds is not None:
        if params.time_seconds < 1:
            raise InvalidAssignmentError("time_seconds", "time_seconds must be at least 1")
        target = TimeTarget(seconds=params.time_seconds)
    elif existing is not None:
        target = existing.target
    else:
        raise InvalidAssignmentError(
            "reps", "exactly one of reps or time_seconds is required"
        )

    kind = params.measurement_type
    if kind is None and existing is not None:
        kind = existing.measurement.kind
    if kind not in (MeasurementType.RPE.value, MeasurementType.KG.value):
        raise InvalidAssignmentError(
            "measurement_type", "measurement_type must be one of: rpe, kg"
        )
    value = params.measurement_value
    if value is None and existing is not None:
        value = existing.measurement.value
    if value is None or value < 0:
        raise InvalidAssignmentError(
            "measurement_value", "measurement_value must be zero or greater"
        )
    if kind == MeasurementType.KG.value:
        measurement: Union[RpeMeasurement, WeightMeasurement] = WeightMeasurement(value=value)
    else:
        measurement = RpeMeasurement(value=value)

    return sets, target, measurement


# =============================================================================
# Transaction
# =============================================================================


class ProgramTransaction:
    """
    Unit of work over one program tree.

    Use as a context manager: the change set is committed when the block
    exits normally and discarded when it raises.

        with store.transaction(actor, program_id) as txn:
            store.add_week(txn, "Week 3")
    """

    def __init__(self, repo: ProgramRepository, tree: ProgramTree, actor: Actor):
        self._repo = repo
        self.tree = tree
        self.actor = actor
        self._inserts: Dict[str, Tuple[str, TreeNode]] = {}
        self._updates: Dict[str, Tuple[str, TreeNode]] = {}
        self._row_updates: List[Dict[str, Any]] = []
        self._deletes: List[Tuple[str, str]] = []
        self.committed = False

    def __enter__(self) -> "ProgramTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        return False

    def insert(self, table: str, node: TreeNode) -> None:
        """Stage a new node; its row is captured at commit time."""
        self._inserts[node.id] = (table, node)

    def mark_dirty(self, table: str, node: TreeNode) -> None:
        """Stage an update of an existing node's row."""
        if node.id in self._inserts:
            return
        self._updates[node.id] = (table, node)

    def update_row(self, table: str, row_id: str, values: Dict[str, Any]) -> None:
        """Stage an update on a row outside the tree (e.g. the catalog)."""
        self._row_updates.append(
            {"op": "update", "table": table, "id": row_id, "values": values}
        )

    def delete(self, table: str, node_id: str) -> None:
        if node_id in self._inserts:
            del self._inserts[node_id]
            return
        self._updates.pop(node_id, None)
        self._deletes.append((table, node_id))

    def changes(self) -> List[Dict[str, Any]]:
        """The change set: deletes (bottom-up), inserts (top-down), then updates."""
        ops: List[Dict[str, Any]] = [
            {"op": "delete", "table": table, "id": node_id}
            for table, node_id in self._deletes
        ]
        for node_id, (table, node) in self._inserts.items():
            ops.append(
                {"op": "insert", "table": table, "id": node_id, "values": _row(node)}
            )
        for node_id, (table, node) in self._updates.items():
            if table == PROGRAMS_TABLE:
                node.updated_at = _now()
            values = {
                k: v for k, v in _row(node).items() if k not in ("id", "created_at")
            }
            ops.append({"op": "update", "table": table, "id": node_id, "values": values})
        ops.extend(self._row_updates)
        return ops

    def commit(self) -> None:
        if self.committed:
            return
        changes = self.changes()
        if changes:
            self._repo.apply_changes(changes)
            logger.info(
                f"Committed {len(changes)} change(s) for program {self.tree.id}"
            )
        self.committed = True


def _row(node: TreeNode) -> Dict[str, Any]:
    if isinstance(node, ProgramTree):
        return node.program_row()
    return node.to_row()


# =============================================================================
# Store
# =============================================================================


class ProgramTreeStore:
    """
    CRUD over the program hierarchy with capacity and membership guarantees.

    Every mutating method receives an open ProgramTransaction; opening one
    loads the tree and runs the authorization predicate first.
    """

    def __init__(
        self,
        program_repo: ProgramRepository,
        authorize: ProgramPredicate = can_edit_program,
        max_days_per_week: int = MAX_DAYS_PER_WEEK,
        max_total_weeks: int = MAX_TOTAL_WEEKS,
    ):
        self._repo = program_repo
        self._authorize = authorize
        self._max_days_per_week = max_days_per_week
        self._max_total_weeks = min(max_total_weeks, MAX_TOTAL_WEEKS)

    # -------------------------------------------------------------------------
    # Loading and transactions
    # -------------------------------------------------------------------------

    def load(self, program_id: str) -> ProgramTree:
        data = self._repo.get_tree(program_id)
        if not data:
            raise NotFoundError("Program", program_id)
        return build_tree(data)

    def transaction(
        self,
        actor: Actor,
        program_id: str,
        authorize: Optional[ProgramPredicate] = None,
    ) -> ProgramTransaction:
        """Load a program and open a transaction if ``actor`` passes the predicate."""
        tree = self.load(program_id)
        predicate = authorize or self._authorize
        if not predicate(actor, tree):
            logger.warning(f"Actor {actor.id} ({actor.role.value}) denied on program {program_id}")
            raise UnauthorizedError()
        return ProgramTransaction(self._repo, tree, actor)

    def resolve_week(self, txn: ProgramTransaction, week_id: str) -> Week:
        """Find a week of this program, telling dangling ids from foreign ones."""
        week = txn.tree.find_week(week_id)
        if week is not None:
            return week
        if self._repo.get_week(week_id):
            raise StructuralMismatchError(
                f"Week {week_id} does not belong to program {txn.tree.id}"
            )
        raise NotFoundError("Week", week_id)

    def resolve_day(self, txn: ProgramTransaction, week_id: str, day_id: str) -> Day:
        """Find a day that belongs to the given week of this program."""
        week = self.resolve_week(txn, week_id)
        day = next((d for d in week.days if d.id == day_id), None)
        if day is not None:
            return day
        if txn.tree.find_day(day_id) or self._repo.get_day(day_id):
            raise StructuralMismatchError(
                f"Day {day_id} does not belong to week {week_id}"
            )
        raise NotFoundError("Day", day_id)

    # -------------------------------------------------------------------------
    # Programs
    # -------------------------------------------------------------------------

    def create_program(self, actor: Actor, data: ProgramCreate) -> ProgramTree:
        if actor.role not in (ActorRole.ADMIN, ActorRole.COACH):
            raise UnauthorizedError("Only coaches and admins create programs")
        self._check_total_weeks(data.total_weeks)

        now = _now()
        tree = ProgramTree(
            id=_new_id(),
            title=data.title,
            description=data.description,
            coach_id=actor.id,
            client_id=data.client_id,
            status=data.status,
            total_weeks=data.total_weeks,
            completed_at=now if data.status == ProgramStatus.COMPLETED else None,
            created_at=now,
            updated_at=now,
        )
        with ProgramTransaction(self._repo, tree, actor) as txn:
            txn.insert(PROGRAMS_TABLE, tree)
        return tree

    def update_program(self, txn: ProgramTransaction, update: ProgramUpdateRequest) -> ProgramTree:
        tree = txn.tree
        if update.title is not None:
            tree.title = update.title
        if update.description is not None:
            tree.description = update.description
        if update.completed_weeks is not None:
            if update.completed_weeks > tree.total_weeks:
                raise InvalidInputError(
                    "completed_weeks",
                    f"completed_weeks ({update.completed_weeks}) exceeds "
                    f"total_weeks ({tree.total_weeks})",
                )
            tree.completed_weeks = update.completed_weeks
        if update.status is not None and update.status != tree.status:
            tree.status = update.status
            tree.completed_at = _now() if update.status == ProgramStatus.COMPLETED else None
        txn.mark_dirty(PROGRAMS_TABLE, tree)
        return tree

    def delete_program(self, txn: ProgramTransaction, log_ids: Sequence[str] = ()) -> None:
        """Delete the whole tree bottom-up, then the program's progress logs and itself."""
        for week in list(txn.tree.weeks):
            self._cascade_week(txn, week)
        txn.tree.weeks = []
        for log_id in log_ids:
            txn.delete(PROGRESS_LOGS_TABLE, log_id)
        txn.delete(PROGRAMS_TABLE, txn.tree.id)

    def set_total_weeks(self, txn: ProgramTransaction, total_weeks: int) -> ProgramTree:
        self._check_total_weeks(total_weeks)
        tree = txn.tree
        current = len(tree.weeks)
        if total_weeks < current:
            raise BelowCurrentCountError(requested=total_weeks, current=current)
        tree.total_weeks = total_weeks
        if tree.completed_weeks > total_weeks:
            tree.completed_weeks = total_weeks
        txn.mark_dirty(PROGRAMS_TABLE, tree)
        return tree

    # -------------------------------------------------------------------------
    # Weeks
    # -------------------------------------------------------------------------

    def ensure_week_capacity(self, tree: ProgramTree) -> None:
        if len(tree.weeks) >= tree.total_weeks:
            raise CapacityExceededError("week", len(tree.weeks), tree.total_weeks)

    def add_week(
        self,
        txn: ProgramTransaction,
        name: str,
        order: Optional[int] = None,
    ) -> Week:
        tree = txn.tree
        self.ensure_week_capacity(tree)
        week = Week(
            id=_new_id(),
            program_id=tree.id,
            name=name,
            order=next_order(tree.weeks),
            created_at=_now(),
        )
        tree.weeks.append(week)
        txn.insert(WEEKS_TABLE, week)
        self.reorder(txn, WEEKS_TABLE, tree.weeks, week, order)
        return week

    def rename_week(self, txn: ProgramTransaction, week: Week, name: str) -> Week:
        week.name = name
        txn.mark_dirty(WEEKS_TABLE, week)
        return week

    def remove_week(self, txn: ProgramTransaction, week: Week) -> None:
        self._cascade_week(txn, week)
        txn.tree.weeks.remove(week)
        self.reorder(txn, WEEKS_TABLE, txn.tree.weeks)

    # -------------------------------------------------------------------------
    # Days
    # -------------------------------------------------------------------------

    def ensure_day_capacity(self, week: Week) -> None:
        if len(week.days) >= self._max_days_per_week:
            raise CapacityExceededError("day", len(week.days), self._max_days_per_week)

    def add_day(
        self,
        txn: ProgramTransaction,
        week: Week,
        name: str,
        order: Optional[int] = None,
    ) -> Day:
        self.ensure_day_capacity(week)
        day = Day(
            id=_new_id(),
            week_id=week.id,
            name=name,
            order=next_order(week.days),
            created_at=_now(),
        )
        week.days.append(day)
        txn.insert(DAYS_TABLE, day)
        self.reorder(txn, DAYS_TABLE, week.days, day, order)
        return day

    def rename_day(self, txn: ProgramTransaction, day: Day, name: str) -> Day:
        day.name = name
        txn.mark_dirty(DAYS_TABLE, day)
        return day

    def remove_day(self, txn: ProgramTransaction, week: Week, day: Day) -> None:
        self._cascade_day(txn, day)
        week.days.remove(day)
        self.reorder(txn, DAYS_TABLE, week.days)

    # -------------------------------------------------------------------------
    # Assignments
    # -------------------------------------------------------------------------

    def attach_exercise(
        self,
        txn: ProgramTransaction,
        day: Day,
        exercise_id: str,
        params: AssignmentParams,
    ) -> Assignment:
        sets, target, measurement = validate_assignment_params(params)
        if any(a.exercise_id == exercise_id for a in day.assignments):
            raise InvalidAssignmentError(
                "exercise_id", f"Exercise {exercise_id} is already attached to day {day.id}"
            )
        assignment = Assignment(
            id=_new_id(),
            program_day_id=day.id,
            exercise_id=exercise_id,
            sets=sets,
            target=target,
            measurement=measurement,
            created_at=_now(),
        )
        day.assignments.append(assignment)
        txn.insert(ASSIGNMENTS_TABLE, assignment)
        return assignment

    def find_assignment(self, day: Day, exercise_id: str) -> Assignment:
        assignment = next(
            (a for a in day.assignments if a.exercise_id == exercise_id), None
        )
        if assignment is None:
            raise NotFoundError("Assignment", exercise_id)
        return assignment

    def update_assignment(
        self,
        txn: ProgramTransaction,
        day: Day,
        exercise_id: str,
        params: AssignmentParams,
    ) -> Assignment:
        assignment = self.find_assignment(day, exercise_id)
        sets, target, measurement = validate_assignment_params(params, existing=assignment)
        assignment.sets = sets
        assignment.target = target
        assignment.measurement = measurement
        txn.mark_dirty(ASSIGNMENTS_TABLE, assignment)
        return assignment

    def detach_exercise(self, txn: ProgramTransaction, day: Day, exercise_id: str) -> None:
        assignment = self.find_assignment(day, exercise_id)
        day.assignments.remove(assignment)
        txn.delete(ASSIGNMENTS_TABLE, assignment.id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def reorder(
        self,
        txn: ProgramTransaction,
        table: str,
        siblings: List[Any],
        node: Any = None,
        position: Optional[int] = None,
    ) -> None:
        """Resequence siblings (optionally placing ``node`` first) and stage the changes."""
        if node is not None and position is not None:
            changed = place(siblings, node, position)
        else:
            changed = resequence(siblings)
        for sibling in changed:
            txn.mark_dirty(table, sibling)

    def _cascade_day(self, txn: ProgramTransaction, day: Day) -> None:
        for assignment in day.assignments:
            txn.delete(ASSIGNMENTS_TABLE, assignment.id)
        day.assignments = []
        txn.delete(DAYS_TABLE, day.id)

    def _cascade_week(self, txn: ProgramTransaction, week: Week) -> None:
        for day in week.days:
            self._cascade_day(txn, day)
        week.days = []
        txn.delete(WEEKS_TABLE, week.id)

    def _check_total_weeks(self, total_weeks: int) -> None:
        if not MIN_TOTAL_WEEKS <= total_weeks <= self._max_total_weeks:
            raise InvalidInputError(
                "total_weeks",
                f"total_weeks must be between {MIN_TOTAL_WEEKS} and {self._max_total_weeks}",
            )
