"""Cognito manager: user pool lookups."""

from typing import Any


class CognitoManager:
    """Async adapter over an aioboto3 ``cognito-idp`` client."""

    def __init__(self, cognito_client: Any, user_pool_id: str) -> None:
        self._cognito_client = cognito_client
        self._user_pool_id = user_pool_id

    async def get_user_by_username(self, username: str) -> dict[str, str]:
        """
        Fetch a user's attributes.

        Args:
            username: Username (or alias) in the user pool

        Returns:
            Mapping of attribute name to value, e.g. ``{"email": ...}``
        """
        response = await self._cognito_client.admin_get_user(
            UserPoolId=self._user_pool_id,
            Username=username,
        )
        return self._attributes_to_dict(response)

    @staticmethod
    def _attributes_to_dict(response: dict[str, Any]) -> dict[str, str]:
        attributes = response.get("UserAttributes") or []
        return {attr["Name"]: attr.get("Value", "") for attr in attributes}
