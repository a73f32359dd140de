"""
API package for the coaching program API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- notifications.py: Post-commit notification scheduling
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_current_actor,
    get_exercise_repo,
    get_program_repo,
    get_progress_log_repo,
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_exercise_repo",
    "get_program_repo",
    "get_progress_log_repo",
    # Authentication
    "get_current_actor",
]
