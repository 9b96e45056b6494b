"""SQS manager: single and bulk JSON messages."""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

from .log_manager import Logger

# SendMessageBatch accepts at most 10 entries
SQS_BATCH_SIZE = 10


@dataclass
class BulkSendResult:
    """
    Per-entry outcome of a bulk send.

    Entries are the ``Failed`` and ``Successful`` items of the
    SendMessageBatch responses, passed through unchanged.
    """

    failed_messages: list[dict[str, Any]] = field(default_factory=list)
    successful_messages: list[dict[str, Any]] = field(default_factory=list)


def chunk(items: list[Any], size: int) -> list[list[Any]]:
    """Split items into consecutive chunks of at most ``size``."""
    if size <= 0:
        raise ValueError("size must be positive")
    return [items[i : i + size] for i in range(0, len(items), size)]


class QueueManager:
    """Async adapter over an aioboto3 SQS client."""

    def __init__(self, sqs_client: Any, logger: Logger | None = None) -> None:
        self._sqs_client = sqs_client
        self._logger = logger

    async def send_message(self, queue_url: str, message: dict[str, Any]) -> dict[str, Any]:
        """Send one message with a JSON body."""
        try:
            return await self._sqs_client.send_message(
                QueueUrl=queue_url,
                MessageBody=json.dumps(message),
            )
        except Exception as e:
            if self._logger is not None:
                self._logger.error(e, queue_url=queue_url)
            raise

    async def send_bulk_messages(
        self,
        queue_url: str,
        messages: list[dict[str, Any]],
        message_index_name: str,
    ) -> BulkSendResult:
        """
        Send any number of messages using SendMessageBatch.

        Messages are split into chunks of 10 which are sent concurrently.
        Each entry's Id is taken from the message's ``message_index_name``
        field. Any failed batch call aborts the whole send.

        Args:
            queue_url: Target queue
            messages: JSON-serializable messages
            message_index_name: Field holding each message's batch entry Id

        Returns:
            BulkSendResult aggregating all chunks, in chunk order
        """
        responses = await asyncio.gather(
            *(
                self._send_batch(queue_url, batch, message_index_name)
                for batch in chunk(messages, SQS_BATCH_SIZE)
            )
        )

        result = BulkSendResult()
        for response in responses:
            result.failed_messages.extend(response.get("Failed", []))
            result.successful_messages.extend(response.get("Successful", []))
        return result

    async def _send_batch(
        self,
        queue_url: str,
        batch: list[dict[str, Any]],
        message_index_name: str,
    ) -> dict[str, Any]:
        entries = [
            {
                "Id": str(message[message_index_name]),
                "MessageBody": json.dumps(message),
            }
            for message in batch
        ]

        try:
            return await self._sqs_client.send_message_batch(
                QueueUrl=queue_url,
                Entries=entries,
            )
        except Exception as e:
            if self._logger is not None:
                self._logger.error(e, queue_url=queue_url, batch_size=len(entries))
            raise
