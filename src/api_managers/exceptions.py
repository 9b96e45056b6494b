"""Exceptions for api-managers."""

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class ApiManagersError(Exception):
    """
    Base exception for all api-managers errors.

    Errors raised by the underlying AWS and Slack clients are not wrapped:
    they propagate as ``botocore.exceptions.ClientError``,
    ``botocore.exceptions.BotoCoreError`` or ``slack_sdk.errors.SlackApiError``.
    """

    pass


# ---------------------------------------------------------------------------
# Input Exceptions
# ---------------------------------------------------------------------------


class ParseError(ApiManagersError, ValueError):
    """
    Raised when a usage-log batch segment cannot be decoded.

    Attributes:
        segment_index: Position of the offending segment among the
            non-empty segments of the batch
        segment: The raw segment text
        reason: Why the segment was rejected
    """

    def __init__(self, segment_index: int, segment: str, reason: str) -> None:
        self.segment_index = segment_index
        self.segment = segment
        self.reason = reason
        super().__init__(f"Invalid usage log segment at index {segment_index}: {reason}")


class InvalidInputError(ApiManagersError, ValueError):
    """
    Raised when a caller-supplied value is structurally invalid.

    Attributes:
        value: The rejected value
        reason: Why the value was rejected
    """

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid input {value!r}: {reason}")
