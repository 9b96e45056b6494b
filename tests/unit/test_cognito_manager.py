"""Tests for CognitoManager."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from api_managers.cognito_manager import CognitoManager


@pytest.fixture
def cognito_client():
    client = MagicMock()
    client.admin_get_user = AsyncMock(
        return_value={
            "Username": "ada",
            "UserAttributes": [
                {"Name": "email", "Value": "ada@example.com"},
                {"Name": "custom:organizationId", "Value": "org-1"},
            ],
        }
    )
    return client


async def test_get_user_by_username(cognito_client):
    attributes = await CognitoManager(cognito_client, "us-east-1_pool").get_user_by_username("ada")

    cognito_client.admin_get_user.assert_awaited_once_with(
        UserPoolId="us-east-1_pool",
        Username="ada",
    )
    assert attributes == {"email": "ada@example.com", "custom:organizationId": "org-1"}


async def test_user_without_attributes(cognito_client):
    cognito_client.admin_get_user.return_value = {"Username": "ada"}

    assert await CognitoManager(cognito_client, "pool").get_user_by_username("ada") == {}
