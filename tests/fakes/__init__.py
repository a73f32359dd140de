"""
Fake implementations for testing.

This package provides in-memory fake implementations of repository
interfaces for fast, isolated testing without database dependencies.
"""

from tests.fakes.database import InMemoryTables
from tests.fakes.exercise_repository import FakeExerciseRepository
from tests.fakes.notification_client import FakeNotificationClient
from tests.fakes.program_repository import FakeProgramRepository
from tests.fakes.progress_log_repository import FakeProgressLogRepository

__all__ = [
    "FakeExerciseRepository",
    "FakeNotificationClient",
    "FakeProgramRepository",
    "FakeProgressLogRepository",
    "InMemoryTables",
]
