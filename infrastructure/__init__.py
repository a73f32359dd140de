"""
Infrastructure layer package.

This package contains concrete implementations of the port interfaces
and clients for external services.
"""

from infrastructure.db import (
    SupabaseExerciseRepository,
    SupabaseProgramRepository,
    SupabaseProgressLogRepository,
)
from infrastructure.notification_client import (
    Notification,
    NotificationAPIError,
    NotificationAPIUnavailable,
    NotificationClient,
    NotificationClientError,
)

__all__ = [
    "SupabaseExerciseRepository",
    "SupabaseProgramRepository",
    "SupabaseProgressLogRepository",
    "Notification",
    "NotificationAPIError",
    "NotificationAPIUnavailable",
    "NotificationClient",
    "NotificationClientError",
]
