"""
Structured logging for Stackrunner.

Every record is emitted as a single JSON line on stderr, carrying the
orchestrator context (controller, pool, instance, operation) so provider
runs can be correlated in the orchestrator's log stream. Stdout stays free
for command results.
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from typing import Any

_CONTEXT_KEYS = ("request_id", "operation", "controller_id", "pool_id", "instance")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class ProviderLogger:
    """Convenience wrapper around :mod:`logging` for provider operations."""

    def __init__(self, name: str = "stackrunner") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(os.environ.get("STACKRUNNER_LOG_LEVEL", "INFO").upper())

    def set_level(self, level: str) -> None:
        """Change the level by name (``DEBUG``, ``INFO``, ...)."""
        self.logger.setLevel(level.upper())

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        operation: str | None = None,
        controller_id: str | None = None,
        pool_id: str | None = None,
        instance: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with orchestrator context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            operation: Provider operation (e.g. 'create_instance').
            controller_id: Orchestrator controller ID.
            pool_id: Pool the instance belongs to.
            instance: Instance name or CloudStack ID.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "operation": operation,
            "controller_id": controller_id,
            "pool_id": pool_id,
            "instance": instance,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def bind(self, **context: Any) -> BoundLogger:
        """Return a view of this logger that adds *context* to every record.

        Used to pin the controller ID and a per-invocation request ID once,
        instead of passing them on every call.
        """
        return BoundLogger(self, context)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


class BoundLogger:
    """A :class:`ProviderLogger` with fixed context fields.

    Keyword arguments given per call override the bound ones.
    """

    def __init__(self, parent: ProviderLogger, context: dict[str, Any]) -> None:
        self.parent = parent
        self.context = context

    def bind(self, **context: Any) -> BoundLogger:
        return BoundLogger(self.parent, {**self.context, **context})

    def log_operation(self, level: int, message: str, **kwargs: Any) -> None:
        self.parent.log_operation(level, message, **{**self.context, **kwargs})

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
sr_logger = ProviderLogger()
