"""Outbound publisher that writes events to the structured log.

Default publisher when no broker is configured. Log shippers pick the
``event_published`` entries up and route them downstream.
"""

from typing import Any

from dsagrind.domain.protocols import LoggerProtocol


class LoggingEventPublisher:
    """EventPublisherProtocol implementation backed by the logger."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def publish(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        self._logger.info("event_published", topic=topic, key=key, payload=payload)
