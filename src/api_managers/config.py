"""Configuration loaded from the Lambda environment."""

import os
from dataclasses import dataclass

from .log_manager import LOG_LEVELS

# Environment variable names
REGION_ENV_VAR = "AWS_REGION"
ENDPOINT_URL_ENV_VAR = "AWS_ENDPOINT_URL"
USER_ORGANIZATION_TABLE_ENV_VAR = "USER_ORGANIZATION_TABLE"
USAGE_LOGS_STREAM_ENV_VAR = "USAGE_LOGS_DELIVERY_STREAM"
USER_POOL_ID_ENV_VAR = "COGNITO_USER_POOL_ID"
SLACK_TOKEN_ENV_VAR = "SLACK_BOT_TOKEN"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"


@dataclass(frozen=True)
class ManagerConfig:
    """
    Settings shared by all managers.

    Attributes:
        region: AWS region (None lets boto resolve it)
        endpoint_url: Override endpoint, e.g. LocalStack
        user_organization_table: DynamoDB table of users and organizations
        usage_logs_delivery_stream: Firehose stream receiving usage logs
        user_pool_id: Cognito user pool for user lookups
        slack_token: Bot token for Slack notifications
        log_level: Minimum level for structured logs
    """

    region: str | None = None
    endpoint_url: str | None = None
    user_organization_table: str = ""
    usage_logs_delivery_stream: str = ""
    user_pool_id: str = ""
    slack_token: str = ""
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        level = self.log_level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls) -> "ManagerConfig":
        """Build the config from environment variables."""
        return cls(
            region=os.environ.get(REGION_ENV_VAR) or None,
            endpoint_url=os.environ.get(ENDPOINT_URL_ENV_VAR) or None,
            user_organization_table=os.environ.get(USER_ORGANIZATION_TABLE_ENV_VAR, ""),
            usage_logs_delivery_stream=os.environ.get(USAGE_LOGS_STREAM_ENV_VAR, ""),
            user_pool_id=os.environ.get(USER_POOL_ID_ENV_VAR, ""),
            slack_token=os.environ.get(SLACK_TOKEN_ENV_VAR, ""),
            log_level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO"),
        )
