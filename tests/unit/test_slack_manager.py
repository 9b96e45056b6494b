"""Tests for SlackManager."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from api_managers.models import SlackNotificationPayload
from api_managers.slack_manager import SlackManager


@pytest.fixture
def slack_client():
    client = MagicMock()
    client.chat_postMessage = AsyncMock(return_value={"ok": True, "ts": "1705329000.000100"})
    return client


async def test_send_notification(slack_client):
    payload = SlackNotificationPayload(text="Partial DR failed for sub-42", channel="#alerts")

    result = await SlackManager(slack_client).send_notification(payload)

    slack_client.chat_postMessage.assert_awaited_once_with(
        text="Partial DR failed for sub-42",
        channel="#alerts",
    )
    assert result["ok"] is True


async def test_failure_logged_and_reraised(slack_client, logger):
    error = SlackApiError("channel_not_found", {"ok": False, "error": "channel_not_found"})
    slack_client.chat_postMessage.side_effect = error

    with pytest.raises(SlackApiError) as exc_info:
        await SlackManager(slack_client, logger=logger).send_notification(
            SlackNotificationPayload(text="hi", channel="#nope")
        )

    assert exc_info.value is error
    assert logger.records == [("ERROR", error, {"channel": "#nope"})]
