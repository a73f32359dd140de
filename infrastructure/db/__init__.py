"""
Database infrastructure package.

Supabase-backed implementations of the repository interfaces defined in
application.ports.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseProgramRepository

    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    program_repo = SupabaseProgramRepository(client)
"""

from infrastructure.db.exercise_repository import SupabaseExerciseRepository
from infrastructure.db.program_repository import SupabaseProgramRepository
from infrastructure.db.progress_log_repository import SupabaseProgressLogRepository

__all__ = [
    "SupabaseExerciseRepository",
    "SupabaseProgramRepository",
    "SupabaseProgressLogRepository",
]
