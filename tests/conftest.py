"""
Pytest fixtures for the coaching program API tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from backend.main import create_app
from backend.settings import Settings
from api.deps import (
    get_current_actor,
    get_exercise_repo,
    get_notification_client,
    get_program_repo,
    get_progress_log_repo,
)
from models.program import Actor, ActorRole
from services.exercise_catalog import ExerciseCatalog
from services.position_tracker import PositionTracker
from services.program_reader import ProgramReader
from services.program_tree import ProgramTreeStore
from services.progress_aggregator import ProgressAggregator
from services.progress_recorder import ProgressRecorder
from services.structural_editor import StructuralEditor
from tests.fakes import (
    FakeExerciseRepository,
    FakeNotificationClient,
    FakeProgramRepository,
    FakeProgressLogRepository,
    InMemoryTables,
)


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------

COACH_ID = "coach-1"
OTHER_COACH_ID = "coach-2"
CLIENT_ID = "client-1"
OTHER_CLIENT_ID = "client-2"
ADMIN_ID = "admin-1"

PROGRAM_ID = "prog-1"


@pytest.fixture
def coach() -> Actor:
    return Actor(id=COACH_ID, role=ActorRole.COACH)


@pytest.fixture
def other_coach() -> Actor:
    return Actor(id=OTHER_COACH_ID, role=ActorRole.COACH)


@pytest.fixture
def client_actor() -> Actor:
    return Actor(id=CLIENT_ID, role=ActorRole.CLIENT)


@pytest.fixture
def other_client() -> Actor:
    return Actor(id=OTHER_CLIENT_ID, role=ActorRole.CLIENT)


@pytest.fixture
def admin() -> Actor:
    return Actor(id=ADMIN_ID, role=ActorRole.ADMIN)


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


# ---------------------------------------------------------------------------
# Fake Repository Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> InMemoryTables:
    return InMemoryTables()


@pytest.fixture
def program_repo(db) -> FakeProgramRepository:
    return FakeProgramRepository(db)


@pytest.fixture
def exercise_repo(db) -> FakeExerciseRepository:
    repo = FakeExerciseRepository(db)
    repo.seed_default_exercises()
    return repo


@pytest.fixture
def log_repo(db) -> FakeProgressLogRepository:
    return FakeProgressLogRepository(db)


@pytest.fixture
def notifier() -> FakeNotificationClient:
    return FakeNotificationClient()


# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


def program_row(**overrides: Any) -> Dict[str, Any]:
    """A programs row as stored by the repository."""
    return {
        "id": PROGRAM_ID,
        "title": "Strength Block",
        "description": "Eight weeks of strength",
        "coach_id": COACH_ID,
        "client_id": CLIENT_ID,
        "status": "active",
        "total_weeks": 4,
        "completed_weeks": 0,
        "current_week_id": None,
        "current_day_id": None,
        "completed_at": None,
        "created_at": "2024-01-15T10:00:00Z",
        "updated_at": "2024-01-15T10:00:00Z",
        **overrides,
    }


@pytest.fixture
def seeded_program(program_repo) -> Dict[str, Any]:
    """
    A program with two weeks of two days each.

    Week 1 (w1): Day 1 (d1, Back Squat 3x5 @ RPE 8), Day 2 (d2)
    Week 2 (w2): Day 1 (d3), Day 2 (d4)
    Current position: (w1, d1).
    """
    program_repo.seed_program(
        program_row(current_week_id="w1", current_day_id="d1")
    )
    for index, week_id in enumerate(("w1", "w2"), start=1):
        program_repo.seed_week({
            "id": week_id,
            "program_id": PROGRAM_ID,
            "name": f"Week {index}",
            "order": index,
            "created_at": f"2024-01-1{index}T10:00:00Z",
        })
    days = [("d1", "w1", 1), ("d2", "w1", 2), ("d3", "w2", 1), ("d4", "w2", 2)]
    for day_id, week_id, order in days:
        program_repo.seed_day({
            "id": day_id,
            "week_id": week_id,
            "name": f"Day {order}",
            "order": order,
            "created_at": "2024-01-15T10:00:00Z",
        })
    program_repo.seed_assignment({
        "id": "a1",
        "program_day_id": "d1",
        "exercise_id": "ex-squat",
        "sets": 3,
        "reps": 5,
        "time_seconds": None,
        "measurement_type": "rpe",
        "measurement_value": "8",
        "created_at": "2024-01-15T10:00:00Z",
    })
    return program_repo.get_by_id(PROGRAM_ID)


# ---------------------------------------------------------------------------
# Service Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store(program_repo) -> ProgramTreeStore:
    return ProgramTreeStore(program_repo)


@pytest.fixture
def tracker(program_repo) -> PositionTracker:
    return PositionTracker(program_repo)


@pytest.fixture
def catalog(exercise_repo) -> ExerciseCatalog:
    return ExerciseCatalog(exercise_repo)


@pytest.fixture
def editor(store, catalog, tracker, log_repo) -> StructuralEditor:
    return StructuralEditor(store, catalog, tracker, log_repo)


@pytest.fixture
def reader(program_repo, store, tracker) -> ProgramReader:
    return ProgramReader(program_repo, store, tracker)


@pytest.fixture
def recorder(store, tracker, log_repo, exercise_repo) -> ProgressRecorder:
    return ProgressRecorder(store, tracker, log_repo, exercise_repo)


@pytest.fixture
def aggregator(store, log_repo, catalog) -> ProgressAggregator:
    return ProgressAggregator(store, log_repo, catalog)


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        jwt_secret="test-secret",
        _env_file=None,
    )


@pytest.fixture(scope="session")
def app(test_settings):
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def api(app, program_repo, exercise_repo, log_repo, notifier):
    """
    Build TestClients acting as a given actor, backed by the fakes.

    Usage:
        as_coach = api(coach)
        as_coach.post("/programs", json={...})
    """

    def _client(actor: Actor) -> TestClient:
        async def _actor() -> Actor:
            return actor

        app.dependency_overrides[get_current_actor] = _actor
        app.dependency_overrides[get_program_repo] = lambda: program_repo
        app.dependency_overrides[get_exercise_repo] = lambda: exercise_repo
        app.dependency_overrides[get_progress_log_repo] = lambda: log_repo
        app.dependency_overrides[get_notification_client] = lambda: notifier
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()
