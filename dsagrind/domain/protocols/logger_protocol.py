"""LoggerProtocol definition for structured logging.

Implementations MUST emit structured logs (message + key-value context) and
MUST NOT receive secrets: callers never pass passwords, hashes or raw tokens.

Usage:
    logger.info("login_succeeded", user_id=str(user.id))
    request_logger = logger.bind(trace_id=trace_id)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None: ...

    def info(self, message: str, /, **context: Any) -> None: ...

    def warning(self, message: str, /, **context: Any) -> None: ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event-style message key.
            error: Optional exception; adds error_type and error_message.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None: ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a logger with ``context`` included in every entry."""
        ...
