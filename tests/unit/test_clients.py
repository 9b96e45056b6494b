"""Tests for ManagerClients wiring."""

import asyncio
from unittest.mock import MagicMock

import pytest

from api_managers import ManagerClients
from api_managers.cognito_manager import CognitoManager
from api_managers.config import ManagerConfig
from api_managers.queue_manager import QueueManager
from api_managers.repository import UserOrganizationRepository
from api_managers.s3_manager import S3Manager
from api_managers.slack_manager import SlackManager
from api_managers.usage_logs import UsageLogsReadManager, UsageLogsWriterManager


class FakeSession:
    """Stands in for aioboto3.Session and records every client it opens."""

    def __init__(self):
        self.opened = []
        self.closed = []

    def client(self, service_name, **kwargs):
        client = MagicMock(name=service_name)
        self.opened.append((service_name, kwargs))

        context = MagicMock()

        async def aenter(*args):
            # Yield so concurrent callers interleave while the client opens
            await asyncio.sleep(0)
            return client

        context.__aenter__.side_effect = aenter

        async def aexit(*args):
            self.closed.append(service_name)
            return False

        context.__aexit__.side_effect = aexit
        return context


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def config():
    return ManagerConfig(
        region="eu-west-1",
        endpoint_url="http://localhost:4566",
        user_organization_table="user-orgs",
        usage_logs_delivery_stream="usage-logs",
        user_pool_id="eu-west-1_pool",
        slack_token="xoxb-test",
        log_level="debug",
    )


class TestGetClient:
    async def test_opens_client_with_config(self, config, session):
        async with ManagerClients(config, session=session) as clients:
            await clients.get_client("s3")

        assert session.opened == [
            ("s3", {"region_name": "eu-west-1", "endpoint_url": "http://localhost:4566"})
        ]

    async def test_reuses_client_per_service(self, config, session):
        async with ManagerClients(config, session=session) as clients:
            first = await clients.get_client("s3")
            second = await clients.get_client("s3")

        assert first is second
        assert len(session.opened) == 1

    async def test_concurrent_first_calls_share_one_client(self, config, session):
        async with ManagerClients(config, session=session) as clients:
            first, second = await asyncio.gather(
                clients.get_client("s3"), clients.get_client("s3")
            )

        assert first is second
        assert len(session.opened) == 1
        assert session.closed == ["s3"]

    async def test_closes_clients_on_exit(self, config, session):
        async with ManagerClients(config, session=session) as clients:
            await clients.get_client("s3")
            await clients.get_client("sqs")

        assert sorted(session.closed) == ["s3", "sqs"]

    async def test_close_without_clients(self, config, session):
        clients = ManagerClients(config, session=session)
        await clients.close()
        assert session.closed == []


class TestManagerFactories:
    async def test_builds_managers(self, config, session):
        async with ManagerClients(config, session=session) as clients:
            assert isinstance(await clients.s3_manager(), S3Manager)
            assert isinstance(await clients.queue_manager(), QueueManager)
            assert isinstance(await clients.cognito_manager(), CognitoManager)
            assert isinstance(await clients.usage_logs_reader(), UsageLogsReadManager)
            assert isinstance(await clients.usage_logs_writer(), UsageLogsWriterManager)
            repo = await clients.user_organization_repository()

        assert isinstance(repo, UserOrganizationRepository)
        assert repo.table_name == "user-orgs"
        # S3 client is shared by the S3 manager and the usage-log reader
        assert [name for name, _ in session.opened] == [
            "s3",
            "sqs",
            "cognito-idp",
            "firehose",
            "dynamodb",
        ]

    def test_slack_manager(self, config, session):
        clients = ManagerClients(config, session=session)
        assert isinstance(clients.slack_manager(), SlackManager)

    def test_log_level_from_config(self, config, session):
        clients = ManagerClients(config, session=session)
        assert clients.logger.is_enabled_for("DEBUG")

    @pytest.mark.parametrize(
        "factory,field",
        [
            ("cognito_manager", "user_pool_id"),
            ("usage_logs_writer", "usage_logs_delivery_stream"),
            ("user_organization_repository", "user_organization_table"),
        ],
    )
    async def test_missing_config(self, session, factory, field):
        clients = ManagerClients(ManagerConfig(), session=session)

        with pytest.raises(ValueError, match=field):
            await getattr(clients, factory)()
        assert session.opened == []

    def test_slack_manager_requires_token(self, session):
        with pytest.raises(ValueError, match="slack_token"):
            ManagerClients(ManagerConfig(), session=session).slack_manager()


def test_config_from_env(monkeypatch, session):
    monkeypatch.setenv("USER_ORGANIZATION_TABLE", "from-env")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    clients = ManagerClients(session=session)

    assert clients.config.user_organization_table == "from-env"
