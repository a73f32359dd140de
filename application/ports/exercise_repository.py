"""
Exercise repository port (interface).

This Protocol defines the contract for the shared exercise catalog.
Infrastructure implementations (e.g., Supabase) must satisfy this interface.
"""

from typing import Dict, List, Optional, Protocol


class ExerciseRepository(Protocol):
    """
    Repository interface for catalog exercises.

    Catalog names are unique; assignments reference exercises by id.
    """

    def get_by_id(self, exercise_id: str) -> Optional[Dict]:
        """
        Get an exercise by its ID.

        Args:
            exercise_id: The exercise's UUID as string

        Returns:
            Exercise dictionary if found, None otherwise
        """
        ...

    def get_by_ids(self, exercise_ids: List[str]) -> List[Dict]:
        """
        Get several exercises at once.

        Args:
            exercise_ids: Exercise UUIDs as strings

        Returns:
            List of exercise dictionaries (missing ids are skipped)
        """
        ...

    def get_by_name(self, name: str) -> Optional[Dict]:
        """
        Get an exercise by its exact name.

        Args:
            name: The exercise name

        Returns:
            Exercise dictionary if found, None otherwise
        """
        ...

    def list_all(self) -> List[Dict]:
        """
        Get every catalog exercise ordered by name.

        Returns:
            List of exercise dictionaries
        """
        ...

    def search(self, query: str) -> List[Dict]:
        """
        Find exercises whose name contains the query (case-insensitive).

        Args:
            query: Substring to look for

        Returns:
            List of matching exercise dictionaries
        """
        ...

    def create(self, data: Dict) -> Dict:
        """
        Create a catalog exercise.

        Args:
            data: Exercise data dictionary

        Returns:
            Created exercise dictionary with generated ID
        """
        ...

    def update(self, exercise_id: str, data: Dict) -> Dict:
        """
        Update a catalog exercise in place.

        Args:
            exercise_id: The exercise's UUID as string
            data: Fields to update

        Returns:
            Updated exercise dictionary
        """
        ...
