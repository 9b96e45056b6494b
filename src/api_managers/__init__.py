"""
api-managers: thin async adapters over AWS and Slack clients.

This library provides:
- Managers for S3, SQS, SES, Lambda, Cognito, Firehose usage logs and Slack
- A DynamoDB single-table key decoder (``schema_unmarshal``)
- The ``$_$``-delimited usage-log wire format used for API metering

Example:
    import aioboto3
    from api_managers import UsageLogsWriterManager, StructuredLogger

    session = aioboto3.Session()
    async with session.client("firehose") as firehose:
        writer = UsageLogsWriterManager(
            firehose_client=firehose,
            delivery_stream_name="usage-logs",
            logger=StructuredLogger("usage-logs"),
        )
        await writer.write_usage_log_for_get_delineated_fields(event, features)
"""

# ---------------------------------------------------------------------------
# Lazy imports for Lambda compatibility
# ---------------------------------------------------------------------------
# ManagerClients is imported lazily via __getattr__ below because it depends
# on aioboto3 and slack_sdk. Handlers that inject their own clients can
# import the managers without either installed.
# ---------------------------------------------------------------------------
from typing import TYPE_CHECKING

from .codec import (
    USAGE_LOG_DELIMITER,
    DecodedUsageLog,
    decode_usage_log_batch,
    encode_usage_log,
)
from .cognito_manager import CognitoManager
from .config import ManagerConfig
from .exceptions import ApiManagersError, InvalidInputError, ParseError
from .lambda_manager import LambdaManager
from .log_manager import Logger, StructuredLogger, get_logger
from .models import (
    NewPolygonPayload,
    PartialDRErrorPayload,
    PartialDRPayload,
    SlackNotificationPayload,
    UsageLog,
    UsageLogBillingType,
    UsageLogMetricFamily,
    UsageLogMetricTypes,
    UsageLogSource,
    UserOrganization,
    ViableImageryVerifierPayload,
)
from .queue_manager import BulkSendResult, QueueManager
from .repository import UserOrganizationRepository
from .s3_manager import S3Manager
from .schema import schema_unmarshal
from .ses_manager import SESManager
from .slack_manager import SlackManager
from .usage_logs import UsageLogsReadManager, UsageLogsWriterManager

if TYPE_CHECKING:
    from .clients import ManagerClients as ManagerClients

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Managers
    "CognitoManager",
    "LambdaManager",
    "QueueManager",
    "S3Manager",
    "SESManager",
    "SlackManager",
    "UsageLogsReadManager",
    "UsageLogsWriterManager",
    "UserOrganizationRepository",
    "ManagerClients",
    "BulkSendResult",
    # Key schema and wire format
    "schema_unmarshal",
    "USAGE_LOG_DELIMITER",
    "DecodedUsageLog",
    "encode_usage_log",
    "decode_usage_log_batch",
    # Models
    "UsageLog",
    "UsageLogSource",
    "UsageLogMetricFamily",
    "UsageLogMetricTypes",
    "UsageLogBillingType",
    "NewPolygonPayload",
    "PartialDRPayload",
    "UserOrganization",
    "SlackNotificationPayload",
    "ViableImageryVerifierPayload",
    "PartialDRErrorPayload",
    # Config and logging
    "ManagerConfig",
    "Logger",
    "StructuredLogger",
    "get_logger",
    # Exceptions
    "ApiManagersError",
    "ParseError",
    "InvalidInputError",
]


def __getattr__(name: str) -> type:
    """Lazy import for modules that require aioboto3 and slack_sdk.

    See Also:
        PEP 562 -- Module __getattr__ and __dir__
    """
    if name == "ManagerClients":
        from .clients import ManagerClients

        return ManagerClients
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
