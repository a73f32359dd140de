"""
Router package for the coaching program API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- programs: Program CRUD and listing
- structure: Weeks, days and exercise assignments
- progress: Position advance, progress logs and summaries
- exercises: Shared exercise catalog
"""

from api.routers.exercises import router as exercises_router
from api.routers.health import router as health_router
from api.routers.programs import router as programs_router
from api.routers.progress import router as progress_router
from api.routers.structure import router as structure_router

__all__ = [
    "exercises_router",
    "health_router",
    "programs_router",
    "progress_router",
    "structure_router",
]
