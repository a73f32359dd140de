"""
Supabase implementation of ExerciseRepository.

This implementation uses the Supabase Python client to interact with
the exercises table, the catalog shared by every program.
"""

import logging
from typing import Dict, List, Optional

from supabase import Client

from core.constants import EXERCISES_TABLE

logger = logging.getLogger(__name__)


class SupabaseExerciseRepository:
    """
    Supabase-backed exercise catalog implementation.

    Queries against the exercises table, whose name column carries a
    unique constraint.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, exercise_id: str) -> Optional[Dict]:
        """
        Get an exercise by its ID.

        Args:
            exercise_id: The exercise's UUID as string

        Returns:
            Exercise dictionary if found, None otherwise
        """
        response = (
            self._client.table(EXERCISES_TABLE)
            .select("*")
            .eq("id", exercise_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_by_ids(self, exercise_ids: List[str]) -> List[Dict]:
        """
        Get several exercises at once.

        Args:
            exercise_ids: Exercise UUIDs as strings

        Returns:
            List of exercise dictionaries
        """
        if not exercise_ids:
            return []
        response = (
            self._client.table(EXERCISES_TABLE)
            .select("*")
            .in_("id", exercise_ids)
            .execute()
        )
        return response.data

    def get_by_name(self, name: str) -> Optional[Dict]:
        """
        Get an exercise by its exact name.

        Args:
            name: The exercise name

        Returns:
            Exercise dictionary if found, None otherwise
        """
        response = (
            self._client.table(EXERCISES_TABLE)
            .select("*")
            .eq("name", name)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def list_all(self) -> List[Dict]:
        response = (
            self._client.table(EXERCISES_TABLE)
            .select("*")
            .order("name")
            .execute()
        )
        return response.data

    def search(self, query: str) -> List[Dict]:
        """
        Find exercises whose name contains the query.

        Args:
            query: Substring to match case-insensitively

        Returns:
            List of matching exercise dictionaries ordered by name
        """
        response = (
            self._client.table(EXERCISES_TABLE)
            .select("*")
            .ilike("name", f"%{query}%")
            .order("name")
            .execute()
        )
        return response.data

    def create(self, data: Dict) -> Dict:
        """
        Create a catalog exercise.

        Args:
            data: Exercise data dictionary

        Returns:
            Created exercise dictionary
        """
        response = (
            self._client.table(EXERCISES_TABLE)
            .insert(data)
            .execute()
        )
        logger.info(f"Inserted exercise {data.get('name')}")
        return response.data[0]

    def update(self, exercise_id: str, data: Dict) -> Dict:
        """
        Update a catalog exercise in place.

        Args:
            exercise_id: The exercise's UUID as string
            data: Fields to update

        Returns:
            Updated exercise dictionary
        """
        response = (
            self._client.table(EXERCISES_TABLE)
            .update(data)
            .eq("id", exercise_id)
            .execute()
        )
        return response.data[0]
