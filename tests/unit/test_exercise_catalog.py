"""
Tests for the shared exercise catalog.
"""

import pytest

from application.exceptions import InvalidInputError, NotFoundError
from models.program import TargetType


@pytest.mark.unit
class TestGetOrCreate:
    def test_returns_existing_entry(self, catalog, exercise_repo):
        before = exercise_repo.count()

        exercise = catalog.get_or_create("Back Squat")

        assert exercise.id == "ex-squat"
        assert exercise_repo.count() == before

    def test_creates_missing_entry(self, catalog, exercise_repo):
        exercise = catalog.get_or_create(
            "Farmer Carry", {"target_type": "time", "created_by": "coach-1"}
        )

        assert exercise.target_type == TargetType.TIME
        assert exercise_repo.get_by_id(exercise.id)["created_by"] == "coach-1"

    def test_is_idempotent(self, catalog, exercise_repo):
        first = catalog.get_or_create("Pallof Press")
        second = catalog.get_or_create("  Pallof Press ")

        assert first.id == second.id

    def test_name_matching_is_exact(self, catalog):
        exercise = catalog.get_or_create("back squat")

        assert exercise.id != "ex-squat"

    def test_blank_name(self, catalog):
        with pytest.raises(InvalidInputError) as exc_info:
            catalog.get_or_create("   ")

        assert exc_info.value.field == "name"


@pytest.mark.unit
class TestUpdate:
    def test_rename(self, catalog, exercise_repo):
        exercise = catalog.update("ex-bench", {"name": "Flat Bench Press"})

        assert exercise.name == "Flat Bench Press"
        assert exercise_repo.get_by_id("ex-bench")["name"] == "Flat Bench Press"

    def test_rename_to_own_name(self, catalog):
        assert catalog.update("ex-bench", {"name": "Bench Press"}).name == "Bench Press"

    def test_name_taken(self, catalog):
        with pytest.raises(InvalidInputError):
            catalog.update("ex-bench", {"name": "Deadlift"})

    def test_ignores_non_editable_fields(self, catalog, exercise_repo):
        catalog.update("ex-plank", {"target_type": "reps", "video_link": "https://v/plank"})

        stored = exercise_repo.get_by_id("ex-plank")
        assert stored["target_type"] == "time"
        assert stored["video_link"] == "https://v/plank"

    def test_missing_exercise(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.update("ex-nope", {"name": "Anything"})


@pytest.mark.unit
class TestLookup:
    def test_search_is_case_insensitive(self, catalog):
        names = [e.name for e in catalog.search("SQUAT")]

        assert names == ["Back Squat", "Front Squat"]

    def test_blank_search_lists_everything(self, catalog, exercise_repo):
        assert len(catalog.search("  ")) == exercise_repo.count()

    def test_get_many_skips_unknown_ids(self, catalog):
        found = catalog.get_many(["ex-squat", "ex-missing", "ex-squat"])

        assert list(found) == ["ex-squat"]

    def test_get_many_empty(self, catalog):
        assert catalog.get_many([]) == {}
