"""
Progress aggregation.

Folds raw progress logs into week -> day occurrence -> exercise summaries.
A day occurrence is a (day_id, completion date) pair, so a day trained on
two different dates shows up twice. Averages only consider sets where the
field was logged: {100, 105, missing} averages to 102.5, not 68.33.
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from application.exceptions import UnauthorizedError
from application.ports import ProgressLogRepository
from models.program import Actor, ActorRole, ProgramTree, ProgressLog, as_utc
from models.progress import (
    DaySummary,
    ExerciseSummary,
    ProgressSummary,
    RestDayEntry,
    SetEntry,
    WeekSummary,
)
from services.authorization import can_view_program
from services.exercise_catalog import ExerciseCatalog
from services.program_tree import ProgramTreeStore

logger = logging.getLogger(__name__)

AVERAGED_FIELDS = ("weight", "reps", "time_seconds", "rpe")

# Sort key for weeks/days that no longer exist in the tree
_UNKNOWN_ORDER = 10**6


def _summarize_exercise(
    exercise_id: str, name: Optional[str], logs: List[ProgressLog]
) -> ExerciseSummary:
    averages: Dict[str, float] = {}
    for field in AVERAGED_FIELDS:
        values = [getattr(log, field) for log in logs if getattr(log, field) is not None]
        if values:
            averages[field] = round(sum(values) / len(values), 2)

    return ExerciseSummary(
        exercise_id=exercise_id,
        exercise_name=name,
        set_count=len(logs),
        averages=averages,
        total_workout_duration=sum(log.workout_duration or 0 for log in logs),
        sets=[
            SetEntry(
                log_id=log.id,
                weight=log.weight,
                reps=log.reps,
                time_seconds=log.time_seconds,
                rpe=log.rpe,
                completed_at=log.completed_at,
            )
            for log in logs
        ],
    )


def aggregate(
    tree: ProgramTree,
    logs: Iterable[ProgressLog],
    exercise_names: Optional[Dict[str, str]] = None,
    week_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> ProgressSummary:
    """
    Group logs by week, day occurrence and exercise.

    Pure: reads only its arguments. Logs pointing at weeks or days that
    were since removed are kept and sorted after the live ones.

    Args:
        tree: Program the logs belong to, used for names and ordering
        logs: Raw progress logs
        exercise_names: Optional id -> catalog name lookup
        week_id: Restrict the summary to one week
        user_id: Recorded on the summary; filtering happens upstream

    Returns:
        ProgressSummary with weeks ordered by week order
    """
    exercise_names = exercise_names or {}
    logs = [log for log in logs if week_id is None or log.week_id == week_id]

    weeks_by_id = {w.id: w for w in tree.weeks}
    days_by_id = {d.id: d for w in tree.weeks for d in w.days}

    grouped: Dict[str, Dict[Tuple[str, date], List[ProgressLog]]] = {}
    for log in sorted(logs, key=lambda entry: as_utc(entry.completed_at)):
        occurrence = (log.day_id, as_utc(log.completed_at).date())
        grouped.setdefault(log.week_id, {}).setdefault(occurrence, []).append(log)

    weeks: List[WeekSummary] = []
    for wid, occurrences in grouped.items():
        week = weeks_by_id.get(wid)
        days: List[DaySummary] = []
        for (day_id, completed_on), day_logs in occurrences.items():
            day = days_by_id.get(day_id)
            per_exercise: "OrderedDict[str, List[ProgressLog]]" = OrderedDict()
            rest_days: List[RestDayEntry] = []
            for log in day_logs:
                if log.is_rest_day or not log.exercise_id:
                    rest_days.append(
                        RestDayEntry(
                            log_id=log.id,
                            completed_at=log.completed_at,
                            workout_duration=log.workout_duration,
                        )
                    )
                else:
                    per_exercise.setdefault(log.exercise_id, []).append(log)

            days.append(
                DaySummary(
                    day_id=day_id,
                    day_name=day.name if day else None,
                    day_order=day.order if day else None,
                    completed_on=completed_on,
                    exercises=[
                        _summarize_exercise(eid, exercise_names.get(eid), ex_logs)
                        for eid, ex_logs in per_exercise.items()
                    ],
                    rest_days=rest_days,
                )
            )
        days.sort(key=lambda d: (d.day_order or _UNKNOWN_ORDER, d.completed_on))
        weeks.append(
            WeekSummary(
                week_id=wid,
                week_name=week.name if week else None,
                week_order=week.order if week else None,
                days=days,
            )
        )
    weeks.sort(key=lambda w: w.week_order or _UNKNOWN_ORDER)

    return ProgressSummary(
        program_id=tree.id,
        user_id=user_id,
        week_id=week_id,
        total_logs=len(logs),
        weeks=weeks,
    )


class ProgressAggregator:
    """Loads a program's logs and summarizes them for the caller."""

    def __init__(
        self,
        store: ProgramTreeStore,
        log_repo: ProgressLogRepository,
        catalog: ExerciseCatalog,
    ):
        self._store = store
        self._log_repo = log_repo
        self._catalog = catalog

    def summarize(
        self,
        actor: Actor,
        program_id: str,
        week_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> ProgressSummary:
        tree = self._store.load(program_id)
        if not can_view_program(actor, tree):
            raise UnauthorizedError()
        # Clients only ever see their own logs
        if actor.role == ActorRole.CLIENT:
            user_id = actor.id

        rows = self._log_repo.list_for_program(program_id, user_id=user_id, week_id=week_id)
        logs = [ProgressLog(**row) for row in rows]
        exercises = self._catalog.get_many(log.exercise_id for log in logs if log.exercise_id)
        logger.info(f"Summarizing {len(logs)} progress log(s) for program {program_id}")
        return aggregate(
            tree,
            logs,
            {eid: exercise.name for eid, exercise in exercises.items()},
            week_id=week_id,
            user_id=user_id,
        )
