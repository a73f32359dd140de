"""
Unit tests for NotificationClient.

Tests the HTTP client that tells clients about program changes.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from infrastructure.notification_client import (
    Notification,
    NotificationAPIError,
    NotificationAPIUnavailable,
    NotificationClient,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def notification_client():
    """Create a NotificationClient instance for testing."""
    return NotificationClient(base_url="http://notification-api:8002/")


@pytest.fixture
def notification():
    return Notification(
        user_id="client-1",
        title="Program Updated",
        body="Your coach updated your program: Strength Block",
        data={"type": "program_update"},
    )


def _mock_client(mock_client_class, response=None, side_effect=None):
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(return_value=response, side_effect=side_effect)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_class.return_value = mock_client
    return mock_client


# ---------------------------------------------------------------------------
# Notification Tests
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestNotification:
    def test_to_dict(self, notification):
        result = notification.to_dict()

        assert result["user_id"] == "client-1"
        assert result["title"] == "Program Updated"
        assert result["data"] == {"type": "program_update"}

    def test_data_defaults_to_empty(self):
        assert Notification(user_id="u", title="t", body="b").to_dict()["data"] == {}


# ---------------------------------------------------------------------------
# NotificationClient Tests
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestNotificationClientSend:
    """Tests for send."""

    @pytest.mark.asyncio
    async def test_send_success(self, notification_client, notification):
        """Accepted response returns without error."""
        mock_response = MagicMock()
        mock_response.status_code = 202

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = _mock_client(mock_client_class, response=mock_response)

            await notification_client.send(notification)

            mock_client.post.assert_called_once()
            call_args = mock_client.post.call_args
            assert call_args[0][0] == "http://notification-api:8002/notifications"
            assert call_args[1]["json"]["user_id"] == "client-1"

    @pytest.mark.asyncio
    async def test_send_error_status(self, notification_client, notification):
        """Non-2xx response raises NotificationAPIError."""
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.text = "Internal Server Error"

        with patch("httpx.AsyncClient") as mock_client_class:
            _mock_client(mock_client_class, response=mock_response)

            with pytest.raises(NotificationAPIError) as exc_info:
                await notification_client.send(notification)

            assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_send_connection_error(self, notification_client, notification):
        """Connection errors raise NotificationAPIUnavailable."""
        with patch("httpx.AsyncClient") as mock_client_class:
            _mock_client(
                mock_client_class, side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(NotificationAPIUnavailable):
                await notification_client.send(notification)

    @pytest.mark.asyncio
    async def test_send_timeout(self, notification_client, notification):
        """Timeouts raise NotificationAPIUnavailable."""
        with patch("httpx.AsyncClient") as mock_client_class:
            _mock_client(
                mock_client_class, side_effect=httpx.TimeoutException("Timed out")
            )

            with pytest.raises(NotificationAPIUnavailable) as exc_info:
                await notification_client.send(notification)

            assert "timed out" in str(exc_info.value)


@pytest.mark.unit
class TestSendProgramUpdate:
    @pytest.mark.asyncio
    async def test_builds_program_update_notification(self, notification_client):
        mock_response = MagicMock()
        mock_response.status_code = 201

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client = _mock_client(mock_client_class, response=mock_response)

            await notification_client.send_program_update(
                client_id="client-1",
                program_title="Strength Block",
                update_type="week_added",
            )

            body = mock_client.post.call_args[1]["json"]
            assert body["user_id"] == "client-1"
            assert body["data"]["update_type"] == "week_added"
            assert "Strength Block" in body["body"]
