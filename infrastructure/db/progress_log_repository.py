"""
Supabase implementation of ProgressLogRepository.

This implementation uses the Supabase Python client to interact with
the progress_logs table. Each row is one completed set or one rest day.
"""

from typing import Dict, List, Optional

from supabase import Client

from core.constants import PROGRESS_LOGS_TABLE


class SupabaseProgressLogRepository:
    """Supabase-backed progress log repository implementation."""

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, log_id: str) -> Optional[Dict]:
        response = (
            self._client.table(PROGRESS_LOGS_TABLE)
            .select("*")
            .eq("id", log_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

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
            List of log dictionaries
        """
        query = (
            self._client.table(PROGRESS_LOGS_TABLE)
            .select("*")
            .eq("program_id", program_id)
        )
        if user_id:
            query = query.eq("user_id", user_id)
        if week_id:
            query = query.eq("week_id", week_id)
        if day_id:
            query = query.eq("day_id", day_id)
        response = query.order("completed_at", desc=True).execute()
        return response.data

    def create(self, data: Dict) -> Dict:
        response = (
            self._client.table(PROGRESS_LOGS_TABLE)
            .insert(data)
            .execute()
        )
        return response.data[0]

    def update(self, log_id: str, data: Dict) -> Dict:
        response = (
            self._client.table(PROGRESS_LOGS_TABLE)
            .update(data)
            .eq("id", log_id)
            .execute()
        )
        return response.data[0]

    def delete(self, log_id: str) -> bool:
        """
        Delete a progress log.

        Args:
            log_id: The log's UUID as string

        Returns:
            True if deleted, False if not found
        """
        response = (
            self._client.table(PROGRESS_LOGS_TABLE)
            .delete()
            .eq("id", log_id)
            .execute()
        )
        return len(response.data) > 0
