"""
Progress summary models.

Summaries are read-only views built from raw progress logs. Averages are
keyed by field name and only contain fields present in at least one set.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class SetEntry(BaseModel):
    """A single logged set as shown inside an exercise summary."""

    log_id: str
    weight: Optional[float] = None
    reps: Optional[int] = None
    time_seconds: Optional[int] = None
    rpe: Optional[float] = None
    completed_at: datetime


class ExerciseSummary(BaseModel):
    """Aggregated sets of one exercise on one day occurrence."""

    exercise_id: str
    exercise_name: Optional[str] = None
    set_count: int
    averages: Dict[str, float] = {}
    total_workout_duration: int = 0
    sets: List[SetEntry] = []


class RestDayEntry(BaseModel):
    log_id: str
    completed_at: datetime
    workout_duration: Optional[int] = None


class DaySummary(BaseModel):
    """One calendar occurrence of a program day."""

    day_id: str
    day_name: Optional[str] = None
    day_order: Optional[int] = None
    completed_on: date
    exercises: List[ExerciseSummary] = []
    rest_days: List[RestDayEntry] = []


class WeekSummary(BaseModel):
    week_id: str
    week_name: Optional[str] = None
    week_order: Optional[int] = None
    days: List[DaySummary] = []


class ProgressSummary(BaseModel):
    """Grouped progress for a program: week -> day occurrence -> exercise."""

    program_id: str
    user_id: Optional[str] = None
    week_id: Optional[str] = None
    total_logs: int = 0
    weeks: List[WeekSummary] = []
