"""Outbound event publisher protocol (port).

Forwards domain events to an external topic for downstream consumers.
"""

from typing import Any, Protocol


class EventPublisherProtocol(Protocol):
    """Topic-based outbound publisher."""

    async def publish(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        """Publish ``payload`` to ``topic`` partitioned by ``key``.

        Raises:
            Exception: Transport failures propagate; the event bus logs them.
        """
        ...
