"""
Progress log repository port (interface).

Progress logs are append-only facts written by clients, one row per
completed set. Structural edits never touch them.
"""

from typing import Dict, List, Optional, Protocol


class ProgressLogRepository(Protocol):
    """Repository interface for client progress logs."""

    def get_by_id(self, log_id: str) -> Optional[Dict]:
        """
        Get a progress log by its ID.

        Args:
            log_id: The log's UUID as string

        Returns:
            Log dictionary if found, None otherwise
        """
        ...

    def list_for_program(
        self,
        program_id: str,
        *,
        user_id: Optional[str] = None,
        week_id: Optional[str] = None,
        day_id: Optional[str] = None,
    ) -> List[Dict]:
        """
        Get logs for a program, newest first.

        Args:
            program_id: The program's UUID as string
            user_id: Optional filter on the logging client
            week_id: Optional filter on the program week
            day_id: Optional filter on the program day

        Returns:
            List of log dictionaries ordered by completed_at descending
        """
        ...

    def create(self, data: Dict) -> Dict:
        """
        Append a progress log.

        Args:
            data: Log data dictionary

        Returns:
            Created log dictionary with generated ID
        """
        ...

    def update(self, log_id: str, data: Dict) -> Dict:
        """
        Update a progress log.

        Args:
            log_id: The log's UUID as string
            data: Fields to update

        Returns:
            Updated log dictionary
        """
        ...

    def delete(self, log_id: str) -> bool:
        """
        Delete a progress log.

        Args:
            log_id: The log's UUID as string

        Returns:
            True if deleted, False if not found
        """
        ...
