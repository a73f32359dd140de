"""
Supabase implementation of ProgramRepository.

This implementation uses the Supabase Python client to interact with
the programs, program_weeks, program_days and program_day_exercises
tables. Structural change sets are committed through the
apply_program_tree_changes PostgreSQL function so that every operation
of a change set runs in a single transaction.
"""

import json
import logging
from typing import Dict, List, Optional

from supabase import Client

from application.exceptions import TreeWriteError
from core.constants import DAYS_TABLE, PROGRAMS_TABLE, WEEKS_TABLE

logger = logging.getLogger(__name__)

# Nested select returning the whole hierarchy in one round trip
TREE_SELECT = (
    "*, weeks:program_weeks(*, days:program_days(*, exercises:program_day_exercises(*)))"
)


class SupabaseProgramRepository:
    """
    Supabase-backed program repository implementation.

    Queries against:
    - programs: Program metadata and current position
    - program_weeks: Ordered weeks within programs
    - program_days: Ordered days within weeks
    - program_day_exercises: Exercise assignments within days
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, program_id: str) -> Optional[Dict]:
        """
        Get a program row by its ID.

        Args:
            program_id: The program's UUID as string

        Returns:
            Program dictionary if found, None otherwise
        """
        response = (
            self._client.table(PROGRAMS_TABLE)
            .select("*")
            .eq("id", program_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_by_coach(self, coach_id: str) -> List[Dict]:
        """
        Get all programs authored by a coach.

        Args:
            coach_id: The coach's user ID

        Returns:
            List of program dictionaries, newest first
        """
        response = (
            self._client.table(PROGRAMS_TABLE)
            .select("*")
            .eq("coach_id", coach_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data

    def get_by_client(self, client_id: str) -> List[Dict]:
        """
        Get all programs assigned to a client.

        Args:
            client_id: The client's user ID

        Returns:
            List of program dictionaries, newest first
        """
        response = (
            self._client.table(PROGRAMS_TABLE)
            .select("*")
            .eq("client_id", client_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data

    def get_tree(self, program_id: str) -> Optional[Dict]:
        """
        Get a program with weeks, days and exercise assignments.

        Args:
            program_id: The program's UUID as string

        Returns:
            Nested program dictionary, or None if not found
        """
        response = (
            self._client.table(PROGRAMS_TABLE)
            .select(TREE_SELECT)
            .eq("id", program_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        program = response.data[0]
        weeks = sorted(program.get("weeks") or [], key=lambda w: w["order"])
        for week in weeks:
            days = sorted(week.get("days") or [], key=lambda d: d["order"])
            for day in days:
                day["exercises"] = day.get("exercises") or []
            week["days"] = days
        program["weeks"] = weeks
        return program

    def get_week(self, week_id: str) -> Optional[Dict]:
        """
        Get a single week row regardless of program.

        Args:
            week_id: The week's UUID as string

        Returns:
            Week dictionary if found, None otherwise
        """
        response = (
            self._client.table(WEEKS_TABLE)
            .select("*")
            .eq("id", week_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_day(self, day_id: str) -> Optional[Dict]:
        """
        Get a single day row regardless of week.

        Args:
            day_id: The day's UUID as string

        Returns:
            Day dictionary if found, None otherwise
        """
        response = (
            self._client.table(DAYS_TABLE)
            .select("*")
            .eq("id", day_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def update(self, program_id: str, data: Dict) -> Dict:
        """
        Update program columns outside a change set.

        Args:
            program_id: The program's UUID as string
            data: Column values to update

        Returns:
            Updated program dictionary

        Raises:
            TreeWriteError: If the update fails
        """
        try:
            response = (
                self._client.table(PROGRAMS_TABLE)
                .update(data)
                .eq("id", program_id)
                .execute()
            )
        except Exception as e:
            raise TreeWriteError(f"Program update failed: {e}") from e
        if not response.data:
            raise TreeWriteError(f"Program {program_id} was not updated")
        return response.data[0]

    def apply_changes(self, changes: List[Dict]) -> None:
        """
        Commit a change set atomically.

        Uses a PostgreSQL stored procedure to ensure all operations happen
        in a single transaction. If any operation fails, the entire change
        set is rolled back.

        Args:
            changes: Ordered list of insert/update/delete operations

        Raises:
            TreeWriteError: If the RPC call fails
        """
        try:
            response = self._client.rpc(
                "apply_program_tree_changes",
                {"p_changes": json.dumps(changes)},
            ).execute()

            if response.data is None:
                raise TreeWriteError("RPC returned no data")
        except Exception as e:
            if isinstance(e, TreeWriteError):
                raise
            logger.error(f"Change set of {len(changes)} operation(s) failed: {e}")
            raise TreeWriteError(f"Atomic tree write failed: {e}") from e
