"""Models package for the coaching program API."""

from models.program import (
    Actor,
    ActorRole,
    Assignment,
    Day,
    Exercise,
    MeasurementType,
    Program,
    ProgramStatus,
    ProgramTree,
    ProgressLog,
    RepsTarget,
    RpeMeasurement,
    TargetType,
    TimeTarget,
    Week,
    WeightMeasurement,
)
from models.progress import (
    DaySummary,
    ExerciseSummary,
    ProgressSummary,
    WeekSummary,
)

__all__ = [
    "Actor",
    "ActorRole",
    "Assignment",
    "Day",
    "Exercise",
    "MeasurementType",
    "Program",
    "ProgramStatus",
    "ProgramTree",
    "ProgressLog",
    "RepsTarget",
    "RpeMeasurement",
    "TargetType",
    "TimeTarget",
    "Week",
    "WeightMeasurement",
    "DaySummary",
    "ExerciseSummary",
    "ProgressSummary",
    "WeekSummary",
]
