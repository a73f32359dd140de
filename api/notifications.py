"""
Post-commit notifications.

Scheduled by routers as FastAPI background tasks, so they run after the
response is sent and never inside a structural transaction.
"""

import logging

from fastapi import BackgroundTasks, Depends

from api.deps import get_notification_client, get_program_repo
from application.ports import ProgramRepository
from infrastructure.notification_client import NotificationClient, NotificationClientError

logger = logging.getLogger(__name__)


async def notify_program_update(
    notifier: NotificationClient,
    program_repo: ProgramRepository,
    program_id: str,
    update_type: str,
) -> None:
    """Tell the assigned client about a committed change. Failures are only logged."""
    program = program_repo.get_by_id(program_id)
    if not program or not program.get("client_id"):
        return
    try:
        await notifier.send_program_update(
            program["client_id"], program["title"], update_type
        )
    except NotificationClientError as e:
        logger.warning(f"Notification for program {program_id} ({update_type}) not sent: {e}")


class ProgramUpdateNotifier:
    """
    Request-scoped dependency that schedules program-update notifications.

    Usage in routers:
        notify: ProgramUpdateNotifier = Depends()
        ...
        notify(program_id, "week_added")
    """

    def __init__(
        self,
        background_tasks: BackgroundTasks,
        program_repo: ProgramRepository = Depends(get_program_repo),
        notifier: NotificationClient = Depends(get_notification_client),
    ):
        self._tasks = background_tasks
        self._repo = program_repo
        self._notifier = notifier

    def __call__(self, program_id: str, update_type: str) -> None:
        self._tasks.add_task(
            notify_program_update, self._notifier, self._repo, program_id, update_type
        )
