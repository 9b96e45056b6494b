"""Slack manager: channel notifications."""

from typing import Any

from .log_manager import Logger
from .models import SlackNotificationPayload


class SlackManager:
    """Async adapter over a ``slack_sdk.web.async_client.AsyncWebClient``."""

    def __init__(self, slack_client: Any, logger: Logger | None = None) -> None:
        self._slack_client = slack_client
        self._logger = logger

    async def send_notification(self, payload: SlackNotificationPayload) -> Any:
        """
        Post a message to a channel.

        Returns:
            The ``AsyncSlackResponse`` of chat.postMessage

        Raises:
            slack_sdk.errors.SlackApiError: If Slack rejects the message
        """
        try:
            return await self._slack_client.chat_postMessage(
                text=payload.text,
                channel=payload.channel,
            )
        except Exception as e:
            if self._logger is not None:
                self._logger.error(e, channel=payload.channel)
            raise
