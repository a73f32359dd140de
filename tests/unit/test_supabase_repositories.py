"""
Unit tests for the Supabase repository implementations.

The Supabase client is replaced by a MagicMock; these tests check the
queries issued and how results and failures are translated.
"""

import json
from unittest.mock import MagicMock

import pytest

from application.exceptions import TreeWriteError
from application.ports import ExerciseRepository, ProgramRepository, ProgressLogRepository
from infrastructure.db import (
    SupabaseExerciseRepository,
    SupabaseProgramRepository,
    SupabaseProgressLogRepository,
)

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit


def _client_returning(data):
    """A mock client whose query chain executes to ``data``."""
    client = MagicMock()
    response = MagicMock()
    response.data = data
    query = client.table.return_value
    for method in ("select", "eq", "limit", "order", "update", "insert", "delete", "in_", "ilike"):
        getattr(query, method).return_value = query
    query.execute.return_value = response
    client.rpc.return_value.execute.return_value = response
    return client


class TestProtocolConformance:
    def test_repositories_satisfy_ports(self):
        client = MagicMock()
        program_repo: ProgramRepository = SupabaseProgramRepository(client)
        exercise_repo: ExerciseRepository = SupabaseExerciseRepository(client)
        log_repo: ProgressLogRepository = SupabaseProgressLogRepository(client)

        assert program_repo is not None
        assert exercise_repo is not None
        assert log_repo is not None


class TestSupabaseProgramRepository:
    def test_get_tree_sorts_children(self):
        client = _client_returning([{
            "id": "p1",
            "weeks": [
                {"id": "w2", "order": 2, "days": None},
                {"id": "w1", "order": 1, "days": [
                    {"id": "d2", "order": 2, "exercises": None},
                    {"id": "d1", "order": 1, "exercises": [{"id": "a1"}]},
                ]},
            ],
        }])

        tree = SupabaseProgramRepository(client).get_tree("p1")

        assert [w["id"] for w in tree["weeks"]] == ["w1", "w2"]
        assert [d["id"] for d in tree["weeks"][0]["days"]] == ["d1", "d2"]
        assert tree["weeks"][0]["days"][1]["exercises"] == []
        assert tree["weeks"][1]["days"] == []
        client.table.assert_called_with("programs")

    def test_get_tree_missing(self):
        assert SupabaseProgramRepository(_client_returning([])).get_tree("p1") is None

    def test_apply_changes_calls_rpc(self):
        client = _client_returning({"applied": 1})
        changes = [{"op": "delete", "table": "program_weeks", "id": "w1"}]

        SupabaseProgramRepository(client).apply_changes(changes)

        name, params = client.rpc.call_args[0]
        assert name == "apply_program_tree_changes"
        assert json.loads(params["p_changes"]) == changes

    def test_apply_changes_without_result(self):
        with pytest.raises(TreeWriteError):
            SupabaseProgramRepository(_client_returning(None)).apply_changes([])

    def test_apply_changes_wraps_client_errors(self):
        client = MagicMock()
        client.rpc.side_effect = RuntimeError("connection reset")

        with pytest.raises(TreeWriteError) as exc_info:
            SupabaseProgramRepository(client).apply_changes([])

        assert "connection reset" in str(exc_info.value)

    def test_update_no_rows(self):
        with pytest.raises(TreeWriteError):
            SupabaseProgramRepository(_client_returning([])).update("p1", {"title": "x"})


class TestSupabaseExerciseRepository:
    def test_get_by_ids_empty_skips_query(self):
        client = MagicMock()

        assert SupabaseExerciseRepository(client).get_by_ids([]) == []
        client.table.assert_not_called()

    def test_search_uses_ilike(self):
        client = _client_returning([{"id": "ex-squat", "name": "Back Squat"}])

        result = SupabaseExerciseRepository(client).search("squat")

        assert result[0]["id"] == "ex-squat"
        client.table.return_value.ilike.assert_called_once_with("name", "%squat%")


class TestSupabaseProgressLogRepository:
    def test_list_applies_filters(self):
        client = _client_returning([])

        SupabaseProgressLogRepository(client).list_for_program("p1", user_id="u1", day_id="d1")

        eq_calls = [c[0] for c in client.table.return_value.eq.call_args_list]
        assert ("program_id", "p1") in eq_calls
        assert ("user_id", "u1") in eq_calls
        assert ("day_id", "d1") in eq_calls

    def test_delete_reports_missing(self):
        assert SupabaseProgressLogRepository(_client_returning([])).delete("log-1") is False
