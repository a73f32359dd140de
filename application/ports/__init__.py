"""
Port interfaces (Protocols) for the coaching program API.

This package defines the interface contracts that the infrastructure
layer must implement. Using Protocols enables:
- Clean separation of concerns
- Easy testing with in-memory fakes
- Dependency inversion (depend on abstractions, not concretions)
"""

from application.ports.exercise_repository import ExerciseRepository
from application.ports.program_repository import ProgramRepository
from application.ports.progress_log_repository import ProgressLogRepository

__all__ = [
    "ExerciseRepository",
    "ProgramRepository",
    "ProgressLogRepository",
]
