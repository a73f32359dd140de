"""
Fake program repository for testing.

This fake implementation stores data in memory and provides
helper methods for test setup and verification. Change sets are applied
all-or-nothing, and a failing commit can be simulated.
"""

import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional

from application.exceptions import TreeWriteError
from core.constants import ASSIGNMENTS_TABLE, DAYS_TABLE, PROGRAMS_TABLE, WEEKS_TABLE
from tests.fakes.database import InMemoryTables


class FakeProgramRepository:
    """
    In-memory fake implementation of ProgramRepository.

    Provides the same interface as SupabaseProgramRepository
    but stores data in dictionaries for fast, isolated testing.
    """

    def __init__(self, db: Optional[InMemoryTables] = None):
        """Initialize with empty (or shared) storage."""
        self.db = db or InMemoryTables()
        self.change_sets: List[List[Dict]] = []
        self._fail_on_next_write: bool = False
        self._fail_on_next_update: bool = False

    # -------------------------------------------------------------------------
    # Test Helpers
    # -------------------------------------------------------------------------

    def seed_program(self, program: Dict) -> Dict:
        self.db[PROGRAMS_TABLE][program["id"]] = dict(program)
        return program

    def seed_week(self, week: Dict) -> Dict:
        self.db[WEEKS_TABLE][week["id"]] = dict(week)
        return week

    def seed_day(self, day: Dict) -> Dict:
        self.db[DAYS_TABLE][day["id"]] = dict(day)
        return day

    def seed_assignment(self, assignment: Dict) -> Dict:
        self.db[ASSIGNMENTS_TABLE][assignment["id"]] = dict(assignment)
        return assignment

    def simulate_write_failure(self) -> None:
        """Make the next apply_changes() call fail without writing anything."""
        self._fail_on_next_write = True

    def simulate_update_failure(self) -> None:
        """Make the next update() call fail."""
        self._fail_on_next_update = True

    def reset(self) -> None:
        """Clear all stored data."""
        self.db.reset()
        self.change_sets.clear()

    # -------------------------------------------------------------------------
    # Repository Interface Implementation
    # -------------------------------------------------------------------------

    def get_by_id(self, program_id: str) -> Optional[Dict]:
        row = self.db[PROGRAMS_TABLE].get(program_id)
        return dict(row) if row else None

    def get_by_coach(self, coach_id: str) -> List[Dict]:
        return [
            dict(p) for p in self.db[PROGRAMS_TABLE].values()
            if p.get("coach_id") == coach_id
        ]

    def get_by_client(self, client_id: str) -> List[Dict]:
        return [
            dict(p) for p in self.db[PROGRAMS_TABLE].values()
            if p.get("client_id") == client_id
        ]

    def get_tree(self, program_id: str) -> Optional[Dict]:
        """
        Get a program with nested weeks, days and exercises.

        Args:
            program_id: The program's UUID as string

        Returns:
            Nested program dictionary, or None if not found
        """
        program = self.db[PROGRAMS_TABLE].get(program_id)
        if not program:
            return None

        tree = copy.deepcopy(program)
        weeks = [
            copy.deepcopy(w) for w in self.db[WEEKS_TABLE].values()
            if w["program_id"] == program_id
        ]
        weeks.sort(key=lambda w: w["order"])
        for week in weeks:
            days = [
                copy.deepcopy(d) for d in self.db[DAYS_TABLE].values()
                if d["week_id"] == week["id"]
            ]
            days.sort(key=lambda d: d["order"])
            for day in days:
                day["exercises"] = [
                    copy.deepcopy(a) for a in self.db[ASSIGNMENTS_TABLE].values()
                    if a["program_day_id"] == day["id"]
                ]
            week["days"] = days
        tree["weeks"] = weeks
        return tree

    def get_week(self, week_id: str) -> Optional[Dict]:
        row = self.db[WEEKS_TABLE].get(week_id)
        return dict(row) if row else None

    def get_day(self, day_id: str) -> Optional[Dict]:
        row = self.db[DAYS_TABLE].get(day_id)
        return dict(row) if row else None

    def update(self, program_id: str, data: Dict) -> Dict:
        """
        Update program columns outside a change set.

        Raises:
            TreeWriteError: If the program is missing or a failure is simulated
        """
        if self._fail_on_next_update:
            self._fail_on_next_update = False
            raise TreeWriteError("Simulated update failure")
        if program_id not in self.db[PROGRAMS_TABLE]:
            raise TreeWriteError(f"Program {program_id} was not updated")

        program = self.db[PROGRAMS_TABLE][program_id]
        program.update(data)
        program["updated_at"] = datetime.now(timezone.utc).isoformat()
        return dict(program)

    def apply_changes(self, changes: List[Dict]) -> None:
        """
        Apply a change set atomically.

        Operations run against a copy of the tables which replaces the
        live tables only when every operation succeeded.

        Raises:
            TreeWriteError: On a simulated failure, a duplicate insert or
                an update of a missing row
        """
        if self._fail_on_next_write:
            self._fail_on_next_write = False
            raise TreeWriteError("Simulated write failure")

        working = self.db.snapshot()
        for change in changes:
            rows = working[change["table"]]
            row_id = change["id"]
            if change["op"] == "insert":
                if row_id in rows:
                    raise TreeWriteError(f"Duplicate key {row_id} in {change['table']}")
                rows[row_id] = dict(change["values"])
            elif change["op"] == "update":
                if row_id not in rows:
                    raise TreeWriteError(f"Row {row_id} missing from {change['table']}")
                rows[row_id].update(change["values"])
            elif change["op"] == "delete":
                rows.pop(row_id, None)
            else:
                raise TreeWriteError(f"Unknown operation {change['op']}")

        self.db.restore(working)
        self.change_sets.append(changes)
