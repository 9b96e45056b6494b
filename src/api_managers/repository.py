"""DynamoDB repository for users and organizations."""

from typing import Any

from . import schema
from .log_manager import Logger
from .models import UserOrganization

# Element type names of the set wrapper, per DynamoDB set type
SET_TYPES = {"SS": "String", "NS": "Number", "BS": "Binary"}


class UserOrganizationRepository:
    """
    Async repository over the single-table user/organization store.

    Items are keyed ``USERID#<user>`` / ``ORG#<org>``; API tokens live under
    ``TOKENID#V0#<token>`` sort keys reachable through the ``SK-index`` GSI.
    Every item returned is normalized with ``schema_unmarshal``.
    """

    def __init__(
        self,
        dynamodb_client: Any,
        user_organization_table: str,
        logger: Logger | None = None,
    ) -> None:
        self._client = dynamodb_client
        self.table_name = user_organization_table
        self._logger = logger

    async def get_user_organizations_by_id(self, user_id: str) -> UserOrganization | None:
        """Get the first organization a user belongs to."""
        response = await self._client.query(
            TableName=self.table_name,
            KeyConditionExpression="PK = :pk AND begins_with(SK, :sk)",
            ExpressionAttributeValues={
                ":pk": {"S": schema.pk_user(user_id)},
                ":sk": {"S": schema.SK_ORG_PREFIX},
            },
        )

        user_orgs = self._unmarshal_items(response)
        if self._logger is not None:
            self._logger.info("User organizations", user_orgs=user_orgs)
        return user_orgs[0] if user_orgs else None

    async def get_organizations_by_token(self, token_id: str) -> UserOrganization | None:
        """Get the organization record owning an API token."""
        response = await self._client.query(
            TableName=self.table_name,
            IndexName=schema.SK_INDEX_NAME,
            KeyConditionExpression="SK = :sk",
            ExpressionAttributeValues={":sk": {"S": schema.sk_token(token_id)}},
        )

        user_orgs = self._unmarshal_items(response)
        if self._logger is not None:
            self._logger.info("User organizations", user_orgs=user_orgs)
        return user_orgs[0] if user_orgs else None

    async def get_user_by_organization_id(self, organization_id: str) -> list[UserOrganization]:
        """Get every user membership record of an organization."""
        response = await self._client.query(
            TableName=self.table_name,
            IndexName=schema.SK_INDEX_NAME,
            KeyConditionExpression="SK = :sk",
            ExpressionAttributeValues={":sk": {"S": schema.sk_org(organization_id)}},
        )

        users = self._unmarshal_items(response)
        if self._logger is not None:
            self._logger.info("Users", users=users)
        return users

    # -------------------------------------------------------------------------
    # Serialization helpers
    # -------------------------------------------------------------------------

    def _unmarshal_items(self, response: dict[str, Any]) -> list[Any]:
        return [
            schema.schema_unmarshal(self._deserialize_map(item))
            for item in response.get("Items", [])
        ]

    def _deserialize_map(self, data: dict[str, Any]) -> dict[str, Any]:
        """Deserialize a DynamoDB map to Python dict."""
        result = {}
        for key, value in data.items():
            result[key] = self._deserialize_value(value)
        return result

    def _deserialize_value(self, value: dict[str, Any]) -> Any:
        """Deserialize a single DynamoDB value; sets become set wrappers."""
        if "S" in value:
            return value["S"]
        elif "N" in value:
            return self._deserialize_number(value["N"])
        elif "BOOL" in value:
            return value["BOOL"]
        elif "B" in value:
            return value["B"]
        elif "M" in value:
            return self._deserialize_map(value["M"])
        elif "L" in value:
            return [self._deserialize_value(v) for v in value["L"]]
        elif "NULL" in value:
            return None
        for set_type, type_name in SET_TYPES.items():
            if set_type in value:
                members = value[set_type]
                if set_type == "NS":
                    members = [self._deserialize_number(n) for n in members]
                return {
                    "wrapperName": schema.SET_WRAPPER_NAME,
                    "type": type_name,
                    "values": list(members),
                }
        return None

    @staticmethod
    def _deserialize_number(num_str: str) -> int | float:
        return int(num_str) if "." not in num_str and "e" not in num_str.lower() else float(num_str)
