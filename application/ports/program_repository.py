"""
Program repository port (interface).

This Protocol defines the contract for program tree persistence.
Infrastructure implementations (e.g., Supabase) must satisfy this interface.

Reads return plain dictionaries. Writes to the program tree are expressed
as a change set: an ordered list of operations committed atomically by
apply_changes(). Each operation is a dictionary of the form:

    {"op": "insert", "table": "program_weeks", "id": <uuid>, "values": {...}}
    {"op": "update", "table": "programs", "id": <uuid>, "values": {...}}
    {"op": "delete", "table": "program_days", "id": <uuid>}
"""

from typing import Dict, List, Optional, Protocol


class ProgramRepository(Protocol):
    """
    Repository interface for coached program persistence.

    All methods work with dictionaries for flexibility.
    The application layer handles conversion to domain models.
    """

    def get_by_id(self, program_id: str) -> Optional[Dict]:
        """
        Get a program row by its ID.

        Args:
            program_id: The program's UUID as string

        Returns:
            Program dictionary if found, None otherwise
        """
        ...

    def get_by_coach(self, coach_id: str) -> List[Dict]:
        """
        Get all programs authored by a coach.

        Args:
            coach_id: The coach's user ID

        Returns:
            List of program dictionaries
        """
        ...

    def get_by_client(self, client_id: str) -> List[Dict]:
        """
        Get all programs assigned to a client.

        Args:
            client_id: The client's user ID

        Returns:
            List of program dictionaries
        """
        ...

    def get_tree(self, program_id: str) -> Optional[Dict]:
        """
        Get a program with its full hierarchy.

        Args:
            program_id: The program's UUID as string

        Returns:
            Program dictionary with a "weeks" list; each week carries a
            "days" list and each day an "exercises" list of
            program_day_exercises rows. None if the program does not exist.
        """
        ...

    def get_week(self, week_id: str) -> Optional[Dict]:
        """
        Get a single week row regardless of program.

        Used to tell a dangling week id from one that belongs to
        another program.

        Args:
            week_id: The week's UUID as string

        Returns:
            Week dictionary if found, None otherwise
        """
        ...

    def get_day(self, day_id: str) -> Optional[Dict]:
        """
        Get a single day row regardless of week.

        Args:
            day_id: The day's UUID as string

        Returns:
            Day dictionary if found, None otherwise
        """
        ...

    def update(self, program_id: str, data: Dict) -> Dict:
        """
        Update program columns outside a change set.

        Used for idempotent best-effort writes such as repairing a stale
        current position on read.

        Args:
            program_id: The program's UUID as string
            data: Column values to update

        Returns:
            Updated program dictionary
        """
        ...

    def apply_changes(self, changes: List[Dict]) -> None:
        """
        Commit a change set atomically.

        Either every operation is persisted or none is.

        Args:
            changes: Ordered list of insert/update/delete operations

        Raises:
            TreeWriteError: If the change set could not be committed
        """
        ...
