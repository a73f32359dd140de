"""
Services package for the coaching program API.

Contains business logic services for:
- Sibling ordering (dense 1..N order within a parent)
- Authorization predicates
- Program tree store and transactions
- Current position tracking and self-healing
- Exercise catalog
- Structural editing (add, update, remove, duplicate)
- Progress log recording and aggregation
"""

from services.authorization import (
    can_edit_program,
    can_train_program,
    can_view_program,
)
from services.exercise_catalog import ExerciseCatalog
from services.ordering import next_order, place, resequence, sort_siblings
from services.position_tracker import PositionTracker
from services.program_reader import ProgramReader
from services.program_tree import (
    ProgramTransaction,
    ProgramTreeStore,
    build_tree,
    validate_assignment_params,
)
from services.progress_aggregator import ProgressAggregator, aggregate
from services.progress_recorder import ProgressRecorder
from services.structural_editor import StructuralEditor

__all__ = [
    # Authorization
    "can_edit_program",
    "can_train_program",
    "can_view_program",
    # Ordering
    "next_order",
    "place",
    "resequence",
    "sort_siblings",
    # Tree
    "ProgramTransaction",
    "ProgramTreeStore",
    "build_tree",
    "validate_assignment_params",
    # Position
    "PositionTracker",
    # Catalog
    "ExerciseCatalog",
    # Editing and reads
    "ProgramReader",
    "StructuralEditor",
    # Progress
    "ProgressAggregator",
    "ProgressRecorder",
    "aggregate",
]
