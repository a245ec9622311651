"""Structured logging utilities.

Every entry is a single JSON object so the Functions host's log collector
can filter on step, level and the blob being processed.
"""

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

LEVELS = {
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class StructuredLogger:
    """Logger that outputs structured JSON for observability.

    Steps used by the ingestion function: read, decode, parse, validate,
    write, complete. ERROR is the level for every condition that aborts an
    invocation.
    """

    def __init__(self, logger: logging.Logger | None = None):
        """Initialize structured logger.

        Args:
            logger: Python logger to use (defaults to root logger)
        """
        self.logger = logger or logging.getLogger()
        self._context: dict[str, Any] = {}

    def set_context(self, **kwargs: Any) -> None:
        """Set persistent context fields for all subsequent logs."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context = {}

    @contextmanager
    def invocation(self, **kwargs: Any) -> Iterator["StructuredLogger"]:
        """Attach context fields (e.g. file_path) for the span of one blob."""
        self.set_context(**kwargs)
        try:
            yield self
        finally:
            self.clear_context()

    def _emit(
        self,
        level: str,
        step: str,
        message: str,
        duration_ms: int | None = None,
        **kwargs: Any,
    ) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "step": step,
            "message": message,
            **self._context,
            **kwargs,
        }
        if duration_ms is not None:
            entry["duration_ms"] = duration_ms

        self.logger.log(LEVELS[level], json.dumps(entry, default=str))

    def info(self, step: str, message: str, **kwargs: Any) -> None:
        self._emit("INFO", step, message, **kwargs)

    def warning(self, step: str, message: str, **kwargs: Any) -> None:
        self._emit("WARNING", step, message, **kwargs)

    def error(self, step: str, message: str, **kwargs: Any) -> None:
        self._emit("ERROR", step, message, **kwargs)

    @contextmanager
    def timed_operation(self, step: str, message: str, **kwargs: Any) -> Iterator[dict[str, Any]]:
        """Log how long the wrapped block took.

        Args:
            step: Pipeline step
            message: Message to log on completion
            **kwargs: Additional fields

        Yields:
            dict the block can fill with fields for the completion entry
        """
        start = time.perf_counter()
        extra_fields: dict[str, Any] = {}

        try:
            yield extra_fields
        except Exception as e:
            self._emit(
                "ERROR",
                step,
                f"{message} - FAILED: {e!s}",
                duration_ms=_elapsed_ms(start),
                error=str(e),
                **kwargs,
                **extra_fields,
            )
            raise

        self._emit("INFO", step, message, duration_ms=_elapsed_ms(start), **kwargs, **extra_fields)


# Global logger instance
structured_logger = StructuredLogger()
