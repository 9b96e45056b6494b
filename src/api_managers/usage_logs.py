"""Usage-log managers: write logs to Firehose, read batches back from S3."""

import time
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from .codec import DecodedUsageLog, decode_usage_log_batch, encode_usage_log
from .log_manager import Logger
from .models import (
    NewPolygonPayload,
    PartialDRPayload,
    UsageLog,
    UsageLogBillingType,
    UsageLogMetricFamily,
    UsageLogMetricTypes,
    UsageLogSource,
)
from .paths import split_object_path

# Query string value selecting per-hectare billing
BILLING_BY_AREA = "by_haa"


def utc_date(time_stamp_ms: int) -> str:
    """Calendar date (YYYY-MM-DD, UTC) of an epoch-milliseconds timestamp."""
    return datetime.fromtimestamp(time_stamp_ms / 1000, UTC).strftime("%Y-%m-%d")


def billing_type_for(billing: str | None) -> UsageLogBillingType:
    """Billing type selected by the ``billing`` query string parameter."""
    if billing == BILLING_BY_AREA:
        return UsageLogBillingType.AREA
    return UsageLogBillingType.COUNT


def _query_params(event: Mapping[str, Any]) -> Mapping[str, Any]:
    # API Gateway sends null when the request has no query string
    return event.get("queryStringParameters") or {}


class UsageLogsReadManager:
    """Reads usage-log batches delivered to S3 by the Firehose stream."""

    def __init__(self, s3_client: Any, logger: Logger | None = None) -> None:
        self._s3_client = s3_client
        self._logger = logger

    def serialize_usage_logs(self, data_object: str) -> list[DecodedUsageLog]:
        """
        Parse a batch object body into usage logs.

        Records that do not fit the usage log model are kept as dictionaries.

        Raises:
            ParseError: If a non-empty segment is not a JSON object
        """
        return decode_usage_log_batch(data_object)

    async def get_usage_logs(self, path: str) -> list[DecodedUsageLog]:
        """
        Fetch and parse the batch stored at ``bucket/key``.

        Raises:
            InvalidInputError: If the path lacks a bucket or key
            ParseError: If a non-empty segment is not a JSON object
        """
        bucket, key = split_object_path(path)

        response = await self._s3_client.get_object(Bucket=bucket, Key=key)
        body = response.get("Body")
        # Invalid UTF-8 bytes are replaced with U+FFFD rather than failing the read
        data = (await body.read()).decode("utf-8", errors="replace") if body is not None else ""

        logs = self.serialize_usage_logs(data)
        if self._logger is not None:
            self._logger.debug("Usage logs read", bucket=bucket, key=key, count=len(logs))
            off_shape = sum(1 for log in logs if not isinstance(log, UsageLog))
            if off_shape:
                self._logger.warning(
                    "Usage logs not matching the model", bucket=bucket, key=key, count=off_shape
                )
        return logs


class UsageLogsWriterManager:
    """
    Emits usage logs to a Firehose delivery stream.

    Every write is one PutRecord call whose data is a single delimited
    segment. The ``write_usage_log_for_*`` helpers build the log for a
    specific API at call time and await the write before returning.
    """

    def __init__(
        self,
        firehose_client: Any,
        delivery_stream_name: str,
        logger: Logger | None = None,
    ) -> None:
        self._firehose_client = firehose_client
        self._delivery_stream_name = delivery_stream_name
        self._logger = logger

    def _now_ms(self) -> int:
        """Current time in milliseconds."""
        return int(time.time() * 1000)

    async def write_usage_log(self, usage_log: UsageLog) -> dict[str, Any]:
        """
        Append one usage log to the delivery stream.

        Returns:
            The PutRecord response

        Raises:
            botocore.exceptions.ClientError: If the append fails
        """
        if self._logger is not None:
            self._logger.info("Input to usage logs", usage_log=usage_log.to_dict())

        response = await self._firehose_client.put_record(
            DeliveryStreamName=self._delivery_stream_name,
            Record={"Data": encode_usage_log(usage_log).encode("utf-8")},
        )

        if self._logger is not None:
            self._logger.info("Successfully logged usage", response=response)
        return response

    async def write_usage_log_for_get_delineated_fields(
        self,
        event: Mapping[str, Any],
        features: Iterable[NewPolygonPayload] | None = None,
    ) -> UsageLog:
        """High-resolution delineation; billed by area when ``billing=by_haa``."""
        billing_type = billing_type_for(_query_params(event).get("billing"))
        return await self._write_high_res(event, billing_type, features)

    async def write_usage_log_for_get_delineated_fields_by_location(
        self,
        event: Mapping[str, Any],
        features: Iterable[NewPolygonPayload] | None = None,
    ) -> UsageLog:
        """High-resolution delineation by location; always billed by count."""
        return await self._write_high_res(event, UsageLogBillingType.COUNT, features)

    async def write_usage_log_for_get_delineated_fields_by_id(
        self,
        event: Mapping[str, Any],
        features: Iterable[NewPolygonPayload] | None = None,
    ) -> UsageLog:
        """High-resolution delineation by field id; always billed by count."""
        return await self._write_high_res(event, UsageLogBillingType.COUNT, features)

    async def write_usage_log_for_pdr_imagery(
        self,
        features: Iterable[PartialDRPayload] | None,
        organization_id: str,
    ) -> UsageLog:
        """
        Partial-DR imagery delivery for a subscription.

        The request id is the first tile's subscription id, or empty when
        there are no tiles.
        """
        payload = list(features or [])
        if self._logger is not None:
            self._logger.debug("Features for logging", features=[f.to_dict() for f in payload])

        time_stamp = self._now_ms()
        usage_log = UsageLog(
            request_id=payload[0].subscription_id if payload else "",
            source=UsageLogSource(
                type=UsageLogMetricTypes.DR_BBOX,
                metric=UsageLogMetricFamily.SUM,
            ),
            organization_id=organization_id,
            api_key_id=organization_id,
            time_stamp=time_stamp,
            date=utc_date(time_stamp),
            payload=tuple(payload),
        )
        await self._timed_write(usage_log)
        return usage_log

    async def _write_high_res(
        self,
        event: Mapping[str, Any],
        billing_type: UsageLogBillingType,
        features: Iterable[NewPolygonPayload] | None,
    ) -> UsageLog:
        payload = list(features or [])
        if self._logger is not None:
            self._logger.debug("Features for logging", features=[f.to_dict() for f in payload])

        token = _query_params(event).get("token") or ""
        time_stamp = self._now_ms()
        usage_log = UsageLog(
            request_id=event["requestContext"]["requestId"],
            source=UsageLogSource(
                type=UsageLogMetricTypes.DF_HIGH_RES,
                metric=UsageLogMetricFamily.NEW_POLYGONS_FILTER,
                billing_type=billing_type,
            ),
            organization_id=token,
            api_key_id=token,
            time_stamp=time_stamp,
            date=utc_date(time_stamp),
            payload=tuple(payload),
        )
        await self._timed_write(usage_log)
        return usage_log

    async def _timed_write(self, usage_log: UsageLog) -> None:
        start_time = time.perf_counter()
        await self.write_usage_log(usage_log)
        ttc_ms = round((time.perf_counter() - start_time) * 1000, 2)

        if self._logger is not None:
            self._logger.info(
                f"Completion time for usage log insertion: {ttc_ms}",
                ttc=ttc_ms,
                request_id=usage_log.request_id,
            )
