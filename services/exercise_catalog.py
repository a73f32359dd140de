"""
Exercise catalog.

The catalog is a deduplicated library of exercise definitions shared by
every program. Assignments reference entries by id, so editing an entry
(for instance renaming it from one assignment's edit form) changes it
everywhere it is used.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from application.exceptions import InvalidInputError, NotFoundError
from application.ports import ExerciseRepository
from core.constants import EXERCISES_TABLE
from models.program import Exercise, TargetType
from services.program_tree import ProgramTransaction

logger = logging.getLogger(__name__)

# Catalog fields that may be edited in place
EDITABLE_FIELDS = ("name", "description", "video_link")


class ExerciseCatalog:
    """First-or-create lookup and shared mutation over catalog exercises."""

    def __init__(self, exercise_repo: ExerciseRepository):
        self._repo = exercise_repo

    def get(self, exercise_id: str) -> Exercise:
        data = self._repo.get_by_id(exercise_id)
        if not data:
            raise NotFoundError("Exercise", exercise_id)
        return Exercise(**data)

    def get_many(self, exercise_ids: Iterable[str]) -> Dict[str, Exercise]:
        ids = sorted(set(exercise_ids))
        if not ids:
            return {}
        return {row["id"]: Exercise(**row) for row in self._repo.get_by_ids(ids)}

    def list(self) -> List[Exercise]:
        return [Exercise(**row) for row in self._repo.list_all()]

    def search(self, query: str) -> List[Exercise]:
        query = query.strip()
        if not query:
            return self.list()
        return [Exercise(**row) for row in self._repo.search(query)]

    def get_or_create(self, name: str, defaults: Optional[Dict[str, Any]] = None) -> Exercise:
        """
        Return the exercise named exactly ``name``, creating it if absent.

        Args:
            name: Exact catalog name
            defaults: target_type, description, video_link and created_by
                used only when a new entry is created

        Returns:
            The existing or newly created exercise
        """
        name = name.strip()
        if not name:
            raise InvalidInputError("name", "Exercise name is required")

        existing = self._repo.get_by_name(name)
        if existing:
            return Exercise(**existing)

        defaults = defaults or {}
        created = self._repo.create(
            {
                "id": str(uuid4()),
                "name": name,
                "target_type": defaults.get("target_type") or TargetType.REPS.value,
                "description": defaults.get("description"),
                "video_link": defaults.get("video_link"),
                "created_by": defaults.get("created_by"),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        logger.info(f"Created catalog exercise '{name}' ({created['id']})")
        return Exercise(**created)

    def update(
        self,
        exercise_id: str,
        fields: Dict[str, Any],
        txn: Optional[ProgramTransaction] = None,
    ) -> Exercise:
        """
        Update name, description or video_link in place.

        When ``txn`` is given the write joins that transaction's change set
        instead of being written immediately.

        Raises:
            NotFoundError: If the exercise does not exist
            InvalidInputError: If the new name is taken by another exercise
        """
        exercise = self.get(exercise_id)
        values = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None}
        if not values:
            return exercise

        if "name" in values:
            values["name"] = values["name"].strip()
            holder = self._repo.get_by_name(values["name"])
            if holder and holder["id"] != exercise_id:
                raise InvalidInputError(
                    "name", f"An exercise named '{values['name']}' already exists"
                )

        if txn is not None:
            txn.update_row(EXERCISES_TABLE, exercise_id, values)
            return exercise.model_copy(update=values)

        updated = self._repo.update(exercise_id, values)
        logger.info(f"Updated catalog exercise {exercise_id}: {sorted(values)}")
        return Exercise(**updated)
