"""Usage-log wire format: JSON records joined by a literal delimiter.

Each write appends one segment, ``<json>$_$``, to the delivery stream. The
stream sink concatenates segments into S3 objects, which are read back by
splitting on the delimiter.
"""

import json
from collections.abc import Mapping
from typing import Any

from .exceptions import ParseError
from .models import UsageLog

USAGE_LOG_DELIMITER = "$_$"

# A decoded segment: a UsageLog, or the raw object when it does not fit the model
DecodedUsageLog = UsageLog | dict[str, Any]


def encode_usage_log(usage_log: UsageLog | Mapping[str, Any]) -> str:
    """
    Encode one usage log as a delimited wire segment.

    Args:
        usage_log: UsageLog, or a plain dictionary already in wire shape

    Returns:
        Compact JSON followed by the trailing delimiter
    """
    data = usage_log.to_dict() if isinstance(usage_log, UsageLog) else dict(usage_log)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False) + USAGE_LOG_DELIMITER


def decode_usage_log_batch(batch: str) -> list[DecodedUsageLog]:
    """
    Decode a wire batch, preserving order.

    Empty segments (including the one after the trailing delimiter) are
    skipped. Every other segment must be a JSON object; a whitespace-only
    segment is not valid JSON and is rejected. Objects that fit the usage
    log model become ``UsageLog`` values. Other objects (written by an older
    or foreign writer) are returned as the parsed dictionary so one
    off-shape record does not make the rest of the batch unreadable.

    Args:
        batch: Concatenated delimited segments

    Returns:
        Usage logs, or plain dictionaries for off-shape records, in batch order

    Raises:
        ParseError: If a non-empty segment is not a JSON object
    """
    segments = [segment for segment in batch.split(USAGE_LOG_DELIMITER) if segment]

    logs: list[DecodedUsageLog] = []
    for index, segment in enumerate(segments):
        try:
            data = json.loads(segment)
        except json.JSONDecodeError as e:
            raise ParseError(index, segment, f"invalid JSON ({e.msg})") from e

        if not isinstance(data, dict):
            raise ParseError(index, segment, "expected a JSON object")

        try:
            logs.append(UsageLog.from_dict(data))
        except (KeyError, AttributeError, TypeError, ValueError):
            logs.append(data)

    return logs
