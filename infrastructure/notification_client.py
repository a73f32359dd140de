"""
HTTP client for the notification service.

Sends push/email notifications to clients when their coach changes a
program. Delivery is fire-and-forget from this service's point of view:
the request layer schedules calls after a successful commit and only
logs failures.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A single notification addressed to one user."""

    user_id: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API request."""
        return {
            "user_id": self.user_id,
            "title": self.title,
            "body": self.body,
            "data": self.data,
        }


class NotificationClientError(Exception):
    """Base exception for notification client errors."""

    pass


class NotificationAPIUnavailable(NotificationClientError):
    """Raised when the notification service is unavailable."""

    pass


class NotificationAPIError(NotificationClientError):
    """Raised when the notification service returns an error."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class NotificationClient:
    """HTTP client for the notification service's /notifications endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
    ):
        """
        Initialize the notification client.

        Args:
            base_url: Base URL of the notification service
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def send(self, notification: Notification) -> None:
        """
        Deliver one notification.

        Args:
            notification: Recipient and message

        Raises:
            NotificationAPIUnavailable: If the service is not reachable
            NotificationAPIError: If the service returns an error response
        """
        url = f"{self._base_url}/notifications"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=notification.to_dict())

                if response.status_code not in (200, 201, 202):
                    logger.error(
                        f"Notification API error: {response.status_code} - {response.text}"
                    )
                    raise NotificationAPIError(
                        f"Failed to send notification: {response.text}",
                        response.status_code,
                    )

        except httpx.ConnectError as e:
            logger.error(f"Notification API unavailable: {e}")
            raise NotificationAPIUnavailable(
                f"Notification API is not available at {self._base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Notification API timeout: {e}")
            raise NotificationAPIUnavailable(
                "Notification API request timed out"
            ) from e

    async def send_program_update(
        self,
        client_id: str,
        program_title: str,
        update_type: str,
    ) -> None:
        """
        Tell a client that their program changed.

        Args:
            client_id: The assigned client's user ID
            program_title: Title shown in the message
            update_type: Short tag such as "week_added" or "exercise_updated"
        """
        await self.send(
            Notification(
                user_id=client_id,
                title="Program Updated",
                body=f"Your coach updated your program: {program_title}",
                data={
                    "type": "program_update",
                    "update_type": update_type,
                    "program_title": program_title,
                },
            )
        )
