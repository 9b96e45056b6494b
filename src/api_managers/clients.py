"""Client wiring: aioboto3 clients and ready-to-use managers from a config."""

import asyncio
from contextlib import AsyncExitStack
from typing import Any

import aioboto3  # type: ignore[import-untyped]
from slack_sdk.web.async_client import AsyncWebClient

from .cognito_manager import CognitoManager
from .config import ManagerConfig
from .lambda_manager import LambdaManager
from .log_manager import StructuredLogger
from .queue_manager import QueueManager
from .repository import UserOrganizationRepository
from .s3_manager import S3Manager
from .ses_manager import SESManager
from .slack_manager import SlackManager
from .usage_logs import UsageLogsReadManager, UsageLogsWriterManager


class ManagerClients:
    """
    Owns the AWS clients of one process and builds managers on top of them.

    Clients are opened lazily on a shared aioboto3 session the first time a
    manager needs them, and all of them are closed on exit.

    Example:
        async with ManagerClients(ManagerConfig.from_env()) as clients:
            writer = await clients.usage_logs_writer()
            await writer.write_usage_log_for_get_delineated_fields(event, features)
    """

    def __init__(
        self,
        config: ManagerConfig | None = None,
        session: aioboto3.Session | None = None,
    ) -> None:
        self.config = config or ManagerConfig.from_env()
        self.logger = StructuredLogger("api_managers", self.config.log_level)
        self._session = session
        self._stack: AsyncExitStack | None = None
        self._clients: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "ManagerClients":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close every client opened so far."""
        if self._stack is not None:
            await self._stack.aclose()
            self._stack = None
        self._clients.clear()

    async def get_client(self, service_name: str) -> Any:
        """Get or create the aioboto3 client for a service."""
        # Concurrent first calls for a service must share one client
        async with self._lock:
            if service_name not in self._clients:
                if self._session is None:
                    self._session = aioboto3.Session()
                if self._stack is None:
                    self._stack = AsyncExitStack()
                self._clients[service_name] = await self._stack.enter_async_context(
                    self._session.client(
                        service_name,
                        region_name=self.config.region,
                        endpoint_url=self.config.endpoint_url,
                    )
                )
            return self._clients[service_name]

    # -------------------------------------------------------------------------
    # Manager factories
    # -------------------------------------------------------------------------

    async def s3_manager(self) -> S3Manager:
        return S3Manager(await self.get_client("s3"), logger=self.logger)

    async def queue_manager(self) -> QueueManager:
        return QueueManager(await self.get_client("sqs"), logger=self.logger)

    async def ses_manager(self) -> SESManager:
        return SESManager(await self.get_client("ses"))

    async def lambda_manager(self) -> LambdaManager:
        return LambdaManager(await self.get_client("lambda"))

    async def cognito_manager(self) -> CognitoManager:
        if not self.config.user_pool_id:
            raise ValueError("user_pool_id is required for CognitoManager")
        return CognitoManager(await self.get_client("cognito-idp"), self.config.user_pool_id)

    async def usage_logs_reader(self) -> UsageLogsReadManager:
        return UsageLogsReadManager(await self.get_client("s3"), logger=self.logger)

    async def usage_logs_writer(self) -> UsageLogsWriterManager:
        if not self.config.usage_logs_delivery_stream:
            raise ValueError("usage_logs_delivery_stream is required for UsageLogsWriterManager")
        return UsageLogsWriterManager(
            await self.get_client("firehose"),
            self.config.usage_logs_delivery_stream,
            logger=self.logger,
        )

    async def user_organization_repository(self) -> UserOrganizationRepository:
        if not self.config.user_organization_table:
            raise ValueError(
                "user_organization_table is required for UserOrganizationRepository"
            )
        return UserOrganizationRepository(
            await self.get_client("dynamodb"),
            self.config.user_organization_table,
            logger=self.logger,
        )

    def slack_manager(self) -> SlackManager:
        if not self.config.slack_token:
            raise ValueError("slack_token is required for SlackManager")
        return SlackManager(AsyncWebClient(token=self.config.slack_token), logger=self.logger)
