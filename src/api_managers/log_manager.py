"""Structured JSON logging for CloudWatch Logs Insights."""

import json
import traceback
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


@runtime_checkable
class Logger(Protocol):
    """
    Logging surface the managers depend on.

    Any object with these methods works, e.g. a ``StructuredLogger`` or an
    AWS Lambda Powertools ``Logger``.
    """

    def debug(self, message: str, **extra: Any) -> None: ...

    def info(self, message: str, **extra: Any) -> None: ...

    def warning(self, message: str, **extra: Any) -> None: ...

    def error(self, message: str | BaseException, **extra: Any) -> None: ...


class StructuredLogger:
    """
    JSON-formatted logger for CloudWatch Logs Insights.

    Every record is printed as one JSON object per line with the timestamp,
    level, logger name, message and any keyword metadata. Records below
    ``level`` are dropped.
    """

    def __init__(self, name: str, level: str = "INFO") -> None:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        self._name = name
        self._level = LOG_LEVELS[level]

    @property
    def name(self) -> str:
        return self._name

    def is_enabled_for(self, level: str) -> bool:
        return LOG_LEVELS[level] >= self._level

    def _log(self, level: str, message: str, **extra: Any) -> None:
        if not self.is_enabled_for(level):
            return
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "logger": self._name,
            "message": message,
            **extra,
        }
        # SDK responses carry datetimes and streaming bodies
        print(json.dumps(log_entry, default=str))

    def debug(self, message: str, **extra: Any) -> None:
        self._log("DEBUG", message, **extra)

    def info(self, message: str, **extra: Any) -> None:
        self._log("INFO", message, **extra)

    def warning(self, message: str, exc_info: bool = False, **extra: Any) -> None:
        if exc_info:
            extra["exception"] = traceback.format_exc()
        self._log("WARNING", message, **extra)

    def error(self, message: str | BaseException, exc_info: bool = False, **extra: Any) -> None:
        if isinstance(message, BaseException):
            extra.setdefault("error_type", type(message).__name__)
            if message.__traceback__ is not None:
                extra["exception"] = "".join(traceback.format_exception(message))
            message = str(message)
        elif exc_info:
            extra["exception"] = traceback.format_exc()
        self._log("ERROR", message, **extra)


def get_logger(name: str, level: str = "INFO") -> StructuredLogger:
    """Create a structured logger for a module or manager."""
    return StructuredLogger(name, level)
