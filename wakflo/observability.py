"""
Observability for Wakflo connectors.

Provides structured logging for action, trigger and resolver
invocations, plus root logger configuration.

Design Philosophy:
- Module loggers via logging.getLogger(__name__) everywhere
- Structured (JSON) records for invocation lifecycle events
- Credentials are never logged
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from wakflo.config import ConnectorSettings

logger = logging.getLogger(__name__)


# =============================================================================
# Log Levels
# =============================================================================


class LogLevel(Enum):
    """Standard log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# =============================================================================
# Structured Logger Protocol
# =============================================================================


class StructuredLogger(Protocol):
    """
    Protocol for structured logging implementations.

    Structured loggers emit logs as key-value pairs rather than
    plain strings, enabling better searchability and analysis.
    """

    def debug(self, message: str, **context: Any) -> None: ...

    def info(self, message: str, **context: Any) -> None: ...

    def warning(self, message: str, **context: Any) -> None: ...

    def error(self, message: str, **context: Any) -> None: ...


# =============================================================================
# JSON Logger Implementation
# =============================================================================


@dataclass
class JSONLogger:
    """
    Structured logger that outputs JSON-formatted logs.

    Example output:
        {"timestamp": "2026-01-02T10:30:00Z", "level": "info",
         "message": "Action completed", "request_id": "abc-123",
         "integration": "shopify", "action": "get_order"}
    """

    name: str = "wakflo"
    request_id: str | None = None
    extra_context: dict[str, Any] = field(default_factory=dict)
    _python_logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._python_logger = logging.getLogger(self.name)

    def _log(self, level: LogLevel, message: str, context: dict[str, Any]) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.value,
            "message": message,
            **self.extra_context,
            **context,
        }

        if self.request_id:
            record["request_id"] = self.request_id

        getattr(self._python_logger, level.value)(json.dumps(record, default=str))

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, context)

    def error(self, message: str, **context: Any) -> None:
        self._log(LogLevel.ERROR, message, context)

    def with_context(self, **extra: Any) -> JSONLogger:
        """Create a new logger with additional context."""
        return JSONLogger(
            name=self.name,
            request_id=self.request_id,
            extra_context={**self.extra_context, **extra},
        )


# =============================================================================
# Invocation Logger
# =============================================================================


@dataclass
class InvocationLogger:
    """
    Lifecycle events for one action, trigger or resolver invocation.

    Example:
        log = InvocationLogger(inner, integration="shopify", operation="get_order")
        log.started()
        log.completed(duration_ms=120.5)
    """

    inner: StructuredLogger
    integration: str
    operation: str
    kind: str = "action"

    def _context(self, **extra: Any) -> dict[str, Any]:
        return {
            "integration": self.integration,
            "operation": self.operation,
            "kind": self.kind,
            **extra,
        }

    def started(self, **extra: Any) -> None:
        self.inner.info(f"{self.kind.capitalize()} started", **self._context(**extra))

    def completed(self, duration_ms: float, **extra: Any) -> None:
        self.inner.info(
            f"{self.kind.capitalize()} completed",
            **self._context(duration_ms=round(duration_ms, 2), **extra),
        )

    def failed(self, error: BaseException, duration_ms: float) -> None:
        self.inner.error(
            f"{self.kind.capitalize()} failed",
            **self._context(
                duration_ms=round(duration_ms, 2),
                error_type=type(error).__name__,
                error=str(error),
            ),
        )


# =============================================================================
# Root Configuration
# =============================================================================


class JsonFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith("{"):
            # Already structured by JSONLogger
            return message
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": message,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: ConnectorSettings) -> None:
    """
    Configure the root logger from settings.

    Production environments get JSON lines; everything else gets a
    human-readable format.
    """
    handler = logging.StreamHandler(sys.stdout)
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.log_level.upper())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.debug(f"Logging configured: level={settings.log_level} env={settings.environment}")
