"""
Current position tracking.

A program's (current_week_id, current_day_id) pointer is treated as a
cached value: it is repaired eagerly after every structural edit and
lazily on every read, so any observer sees a pointer that either
resolves to live children of the program or is unset.

Pointer rules:
- no weeks: both unset
- week resolves: keep it; keep the day if it belongs to that week,
  otherwise use the week's first day (unset if the week has no days)
- week does not resolve (or is unset): first week by order and its first day
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from application.exceptions import InvalidInputError, TreeWriteError
from application.ports import ProgramRepository
from core.constants import PROGRAMS_TABLE
from models.program import Day, ProgramStatus, ProgramTree, Week
from services.program_tree import ProgramTransaction

logger = logging.getLogger(__name__)

Position = Tuple[Optional[str], Optional[str]]


def _first_day(week: Week) -> Optional[Day]:
    return min(week.days, key=lambda d: d.order, default=None)


def _position_of(week: Week) -> Position:
    day = _first_day(week)
    return week.id, day.id if day else None


class PositionTracker:
    """Maintains, repairs and advances the current week/day pointer."""

    def __init__(self, program_repo: Optional[ProgramRepository] = None):
        self._repo = program_repo

    @staticmethod
    def first_position(tree: ProgramTree) -> Position:
        weeks = tree.ordered_weeks()
        if not weeks:
            return None, None
        return _position_of(weeks[0])

    @classmethod
    def resolve(cls, tree: ProgramTree) -> Position:
        """The repaired pointer for ``tree``, without mutating it."""
        week = tree.find_week(tree.current_week_id) if tree.current_week_id else None
        if week is None:
            return cls.first_position(tree)
        if tree.current_day_id and any(d.id == tree.current_day_id for d in week.days):
            return week.id, tree.current_day_id
        return _position_of(week)

    @classmethod
    def is_valid(cls, tree: ProgramTree) -> bool:
        return cls.resolve(tree) == (tree.current_week_id, tree.current_day_id)

    # -------------------------------------------------------------------------
    # Write-time transitions
    # -------------------------------------------------------------------------

    def revalidate(self, txn: ProgramTransaction) -> bool:
        """Repair the pointer inside a structural transaction. Returns True if it moved."""
        tree = txn.tree
        position = self.resolve(tree)
        if position == (tree.current_week_id, tree.current_day_id):
            return False
        logger.info(
            f"Program {tree.id} position moved from "
            f"({tree.current_week_id}, {tree.current_day_id}) to {position}"
        )
        tree.current_week_id, tree.current_day_id = position
        txn.mark_dirty(PROGRAMS_TABLE, tree)
        return True

    def reactivate(self, txn: ProgramTransaction, week: Week) -> None:
        """Resume a completed program at a freshly appended week."""
        tree = txn.tree
        tree.status = ProgramStatus.ACTIVE
        tree.completed_at = None
        tree.current_week_id, tree.current_day_id = _position_of(week)
        txn.mark_dirty(PROGRAMS_TABLE, tree)
        logger.info(f"Program {tree.id} reactivated at week {week.id}")

    def advance(self, txn: ProgramTransaction, week: Week, day: Day) -> None:
        """
        Move past a finished day.

        Next day in the week, else the first day of the next week (counting
        the finished week), else the program is completed.
        """
        tree = txn.tree
        if tree.status != ProgramStatus.ACTIVE:
            raise InvalidInputError(
                "status", f"Program {tree.id} is {tree.status.value}, not active"
            )

        next_day = min(
            (d for d in week.days if d.order > day.order),
            key=lambda d: d.order,
            default=None,
        )
        if next_day is not None:
            tree.current_week_id, tree.current_day_id = week.id, next_day.id
            logger.info(f"Program {tree.id} moved to day {next_day.id}")
        else:
            tree.completed_weeks = min(tree.completed_weeks + 1, tree.total_weeks)
            next_week = min(
                (w for w in tree.weeks if w.order > week.order),
                key=lambda w: w.order,
                default=None,
            )
            if next_week is not None:
                tree.current_week_id, tree.current_day_id = _position_of(next_week)
                logger.info(f"Program {tree.id} moved to week {next_week.id}")
            else:
                tree.status = ProgramStatus.COMPLETED
                tree.completed_at = datetime.now(timezone.utc)
                logger.info(f"Program {tree.id} completed")
        txn.mark_dirty(PROGRAMS_TABLE, tree)

    # -------------------------------------------------------------------------
    # Read-time self-healing
    # -------------------------------------------------------------------------

    def heal(self, tree: ProgramTree) -> ProgramTree:
        """
        Repair a stale pointer on read.

        The returned tree always carries a valid pointer. The repair is
        persisted best-effort; concurrent healers converge on the same value.
        """
        position = self.resolve(tree)
        if position == (tree.current_week_id, tree.current_day_id):
            return tree

        logger.warning(
            f"Repairing stale position on program {tree.id}: "
            f"({tree.current_week_id}, {tree.current_day_id}) -> {position}"
        )
        tree.current_week_id, tree.current_day_id = position
        if self._repo is not None:
            try:
                self._repo.update(
                    tree.id,
                    {"current_week_id": position[0], "current_day_id": position[1]},
                )
            except TreeWriteError as e:
                logger.warning(f"Position repair for program {tree.id} not persisted: {e}")
        return tree
