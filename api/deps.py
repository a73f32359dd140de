"""
FastAPI Dependency Providers for the coaching program API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository providers create new instances per-request
- Service providers compose repositories into use-case services
- Auth providers extract the acting user from the bearer token

Usage in routers:
    from api.deps import get_current_actor, get_structural_editor

    @router.post("/programs/{program_id}/weeks")
    def add_week(
        program_id: str,
        actor: Actor = Depends(get_current_actor),
        editor: StructuralEditor = Depends(get_structural_editor),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_program_repo] = lambda: FakeProgramRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from application.ports import (
    ExerciseRepository,
    ProgramRepository,
    ProgressLogRepository,
)
from backend.auth import parse_bearer, validate_access_token
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.db import (
    SupabaseExerciseRepository,
    SupabaseProgramRepository,
    SupabaseProgressLogRepository,
)
from infrastructure.notification_client import NotificationClient
from models.program import Actor
from services.exercise_catalog import ExerciseCatalog
from services.position_tracker import PositionTracker
from services.program_reader import ProgramReader
from services.program_tree import ProgramTreeStore
from services.progress_aggregator import ProgressAggregator
from services.progress_recorder import ProgressRecorder
from services.structural_editor import StructuralEditor


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_program_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProgramRepository:
    """
    Get ProgramRepository implementation.

    Returns a SupabaseProgramRepository instance with injected client.
    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseProgramRepository(client)


def get_exercise_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ExerciseRepository:
    """Get ExerciseRepository implementation."""
    return SupabaseExerciseRepository(client)


def get_progress_log_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProgressLogRepository:
    """Get ProgressLogRepository implementation."""
    return SupabaseProgressLogRepository(client)


# =============================================================================
# Service Providers
# =============================================================================


def get_tree_store(
    program_repo: ProgramRepository = Depends(get_program_repo),
    settings: Settings = Depends(get_settings),
) -> ProgramTreeStore:
    return ProgramTreeStore(
        program_repo,
        max_days_per_week=settings.max_days_per_week,
        max_total_weeks=settings.max_total_weeks,
    )


def get_position_tracker(
    program_repo: ProgramRepository = Depends(get_program_repo),
) -> PositionTracker:
    return PositionTracker(program_repo)


def get_exercise_catalog(
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
) -> ExerciseCatalog:
    return ExerciseCatalog(exercise_repo)


def get_structural_editor(
    store: ProgramTreeStore = Depends(get_tree_store),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
    tracker: PositionTracker = Depends(get_position_tracker),
    log_repo: ProgressLogRepository = Depends(get_progress_log_repo),
) -> StructuralEditor:
    """
    Get the StructuralEditor for coach-facing tree edits.

    Each call of an editor method runs in its own transaction.
    """
    return StructuralEditor(store, catalog, tracker, log_repo)


def get_program_reader(
    program_repo: ProgramRepository = Depends(get_program_repo),
    store: ProgramTreeStore = Depends(get_tree_store),
    tracker: PositionTracker = Depends(get_position_tracker),
) -> ProgramReader:
    return ProgramReader(program_repo, store, tracker)


def get_progress_recorder(
    store: ProgramTreeStore = Depends(get_tree_store),
    tracker: PositionTracker = Depends(get_position_tracker),
    log_repo: ProgressLogRepository = Depends(get_progress_log_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
) -> ProgressRecorder:
    return ProgressRecorder(store, tracker, log_repo, exercise_repo)


def get_progress_aggregator(
    store: ProgramTreeStore = Depends(get_tree_store),
    log_repo: ProgressLogRepository = Depends(get_progress_log_repo),
    catalog: ExerciseCatalog = Depends(get_exercise_catalog),
) -> ProgressAggregator:
    return ProgressAggregator(store, log_repo, catalog)


# =============================================================================
# Notification Client Provider
# =============================================================================


def get_notification_client(
    settings: Settings = Depends(get_settings),
) -> NotificationClient:
    """
    Get NotificationClient instance for the notification service.

    Args:
        settings: Application settings (injected)

    Returns:
        NotificationClient: Client for program update notifications
    """
    return NotificationClient(base_url=settings.notification_api_url)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_actor(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Actor:
    """
    Get the authenticated actor.

    Args:
        authorization: Bearer token header
        settings: Application settings (injected)

    Returns:
        Actor: User id and role from the token

    Raises:
        HTTPException: 401 if authentication fails
    """
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing authorization header",
        )
    return validate_access_token(parse_bearer(authorization), settings)


# =============================================================================
# Exports
# =============================================================================

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
    # Services
    "get_exercise_catalog",
    "get_position_tracker",
    "get_program_reader",
    "get_progress_aggregator",
    "get_progress_recorder",
    "get_structural_editor",
    "get_tree_store",
    # Notifications
    "get_notification_client",
    # Authentication
    "get_current_actor",
]
