"""
Domain models for coached training programs.

A program owns an ordered list of weeks, each week an ordered list of
days, and each day a set of exercise assignments. Assignments reference
catalog exercises by id; they never embed exercise fields.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from core.constants import MAX_NAME_LENGTH, MAX_TOTAL_WEEKS, MIN_TOTAL_WEEKS


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to UTC; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ProgramStatus(str, Enum):
    """Program lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActorRole(str, Enum):
    """Roles supplied by the identity provider."""

    ADMIN = "admin"
    COACH = "coach"
    CLIENT = "client"


class TargetType(str, Enum):
    """What an exercise is prescribed in."""

    REPS = "reps"
    TIME = "time"


class MeasurementType(str, Enum):
    """How an assignment's load is expressed."""

    RPE = "rpe"
    KG = "kg"


class Actor(BaseModel):
    """The authenticated caller of an operation."""

    id: str
    role: ActorRole

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN


# =============================================================================
# Assignment targets and measurements
# =============================================================================


class RepsTarget(BaseModel):
    """Prescribe a number of repetitions per set."""

    kind: Literal["reps"] = "reps"
    reps: int = Field(ge=1)


class TimeTarget(BaseModel):
    """Prescribe a duration per set."""

    kind: Literal["time"] = "time"
    seconds: int = Field(ge=1)


Target = Annotated[Union[RepsTarget, TimeTarget], Field(discriminator="kind")]


class RpeMeasurement(BaseModel):
    """Load prescribed as a rate of perceived exertion."""

    kind: Literal["rpe"] = "rpe"
    value: Decimal = Field(ge=0)


class WeightMeasurement(BaseModel):
    """Load prescribed as a weight in kilograms."""

    kind: Literal["kg"] = "kg"
    value: Decimal = Field(ge=0)


Measurement = Annotated[
    Union[RpeMeasurement, WeightMeasurement], Field(discriminator="kind")
]


# =============================================================================
# Catalog
# =============================================================================


class Exercise(BaseModel):
    """A shared catalog entry. Names are unique across the catalog."""

    id: str
    name: str
    target_type: TargetType = TargetType.REPS
    description: Optional[str] = None
    video_link: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# Program tree
# =============================================================================


class Assignment(BaseModel):
    """An exercise attached to a day with concrete parameters."""

    id: str
    program_day_id: str
    exercise_id: str
    sets: int = Field(ge=1)
    target: Target
    measurement: Measurement
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Assignment":
        """Build an assignment from a program_day_exercises row."""
        if row.get("time_seconds") is not None:
            target: Dict[str, Any] = {"kind": "time", "seconds": row["time_seconds"]}
        else:
            target = {"kind": "reps", "reps": row.get("reps")}
        return cls(
            id=row["id"],
            program_day_id=row["program_day_id"],
            exercise_id=row["exercise_id"],
            sets=row["sets"],
            target=target,
            measurement={
                "kind": row.get("measurement_type", "rpe"),
                "value": row.get("measurement_value", 0),
            },
            created_at=row.get("created_at"),
        )

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the program_day_exercises column layout."""
        return {
            "id": self.id,
            "program_day_id": self.program_day_id,
            "exercise_id": self.exercise_id,
            "sets": self.sets,
            "reps": self.target.reps if isinstance(self.target, RepsTarget) else None,
            "time_seconds": (
                self.target.seconds if isinstance(self.target, TimeTarget) else None
            ),
            "measurement_type": self.measurement.kind,
            "measurement_value": str(self.measurement.value),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Day(BaseModel):
    """A day within a program week."""

    id: str
    week_id: str
    name: str
    order: int = Field(ge=1)
    assignments: List[Assignment] = []
    created_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"assignments"})


class Week(BaseModel):
    """A week within a training program."""

    id: str
    program_id: str
    name: str
    order: int = Field(ge=1)
    days: List[Day] = []
    created_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"days"})


class Program(BaseModel):
    """A coach-authored, client-assigned multi-week training plan."""

    id: str
    title: str
    description: Optional[str] = None
    coach_id: str
    client_id: Optional[str] = None
    status: ProgramStatus = ProgramStatus.ACTIVE
    total_weeks: int = Field(ge=MIN_TOTAL_WEEKS, le=MAX_TOTAL_WEEKS)
    completed_weeks: int = Field(default=0, ge=0)
    current_week_id: Optional[str] = None
    current_day_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProgramTree(Program):
    """A program together with its full week/day/assignment hierarchy."""

    weeks: List[Week] = []

    def program_row(self) -> Dict[str, Any]:
        """Program columns only, without the nested tree."""
        return self.model_dump(mode="json", exclude={"weeks"})

    def find_week(self, week_id: str) -> Optional[Week]:
        return next((w for w in self.weeks if w.id == week_id), None)

    def find_day(self, day_id: str) -> Optional[Tuple[Week, Day]]:
        for week in self.weeks:
            for day in week.days:
                if day.id == day_id:
                    return week, day
        return None

    def ordered_weeks(self) -> List[Week]:
        return sorted(self.weeks, key=lambda w: w.order)


# =============================================================================
# Progress logs
# =============================================================================


class ProgressLog(BaseModel):
    """One completed set, or one rest day, logged by a client."""

    id: str
    program_id: str
    user_id: str
    exercise_id: Optional[str] = None
    week_id: str
    day_id: str
    weight: Optional[float] = None
    reps: Optional[int] = None
    time_seconds: Optional[int] = None
    rpe: Optional[float] = None
    workout_duration: Optional[int] = None
    is_rest_day: bool = False
    completed_at: datetime
    created_at: Optional[datetime] = None

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: datetime) -> datetime:
        return as_utc(v)


# =============================================================================
# Request models
# =============================================================================


class ProgramCreate(BaseModel):
    """Request model for creating a program."""

    title: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=5000)
    client_id: Optional[str] = None
    total_weeks: int = Field(ge=MIN_TOTAL_WEEKS, le=MAX_TOTAL_WEEKS)
    status: ProgramStatus = ProgramStatus.ACTIVE


class ProgramUpdateRequest(BaseModel):
    """
    Request model for PATCH updates to a program.

    completed_weeks is an independent counter; it is never derived
    from the current position.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[ProgramStatus] = None
    completed_weeks: Optional[int] = Field(None, ge=0)


class TotalWeeksRequest(BaseModel):
    total_weeks: int


class WeekCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    order: Optional[int] = Field(None, ge=1, description="1-based position; appends when omitted")


class DayCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    order: Optional[int] = Field(None, ge=1, description="1-based position; appends when omitted")


class NameUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)


class AssignmentParams(BaseModel):
    """
    Raw assignment parameters as sent by editors.

    Bounds are checked by the tree store so that violations surface as
    InvalidAssignment with the offending field.
    """

    sets: Optional[int] = None
    reps: Optional[int] = None
    time_seconds: Optional[int] = None
    measurement_type: Optional[str] = None
    measurement_value: Optional[Decimal] = None


class ExerciseAttachRequest(AssignmentParams):
    """Attach a catalog exercise, looked up by id or first-or-created by name."""

    exercise_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    target_type: Optional[TargetType] = None
    description: Optional[str] = None
    video_link: Optional[str] = None


class ExerciseUpdateRequest(AssignmentParams):
    """Update assignment parameters and, optionally, shared catalog fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = None
    video_link: Optional[str] = None


class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    target_type: TargetType = TargetType.REPS
    description: Optional[str] = None
    video_link: Optional[str] = None


class ProgressLogCreate(BaseModel):
    """Request model for logging one completed set or a rest day."""

    exercise_id: Optional[str] = None
    week_id: str
    day_id: str
    weight: Optional[float] = Field(None, ge=0)
    reps: Optional[int] = Field(None, ge=0)
    time_seconds: Optional[int] = Field(None, ge=0)
    rpe: Optional[float] = None
    workout_duration: Optional[int] = Field(None, ge=0)
    is_rest_day: bool = False
    completed_at: datetime

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class ProgressLogUpdate(BaseModel):
    weight: Optional[float] = Field(None, ge=0)
    reps: Optional[int] = Field(None, ge=0)
    time_seconds: Optional[int] = Field(None, ge=0)
    rpe: Optional[float] = None
    workout_duration: Optional[int] = Field(None, ge=0)
    completed_at: Optional[datetime] = None

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class AdvanceRequest(BaseModel):
    """Mark a day as finished and move the current position forward."""

    day_id: str


# =============================================================================
# Response models
# =============================================================================


class ProgramListResponse(BaseModel):
    programs: List[ProgramTree]
    total: int


class ExerciseListResponse(BaseModel):
    exercises: List[Exercise]
    total: int


class ProgressLogListResponse(BaseModel):
    logs: List[ProgressLog]
    total: int


class PositionResponse(BaseModel):
    """Current position of a program after a transition."""

    program_id: str
    status: ProgramStatus
    current_week_id: Optional[str] = None
    current_day_id: Optional[str] = None
    completed_weeks: int
