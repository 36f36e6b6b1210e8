"""Forwards every domain event to the outbound user events topic.

Subscribed on DomainEvent so it receives all events. Messages are keyed by
``user_id`` so one user's events stay ordered on a partitioned broker.
"""

from dsagrind.domain.events import DomainEvent
from dsagrind.domain.protocols import EventPublisherProtocol


class TopicForwarder:
    """Event bus handler that republishes events to a topic."""

    def __init__(self, publisher: EventPublisherProtocol, topic: str) -> None:
        self._publisher = publisher
        self._topic = topic

    async def __call__(self, event: DomainEvent) -> None:
        payload = event.to_payload()
        key = str(payload.get("user_id", event.event_id))
        await self._publisher.publish(self._topic, key, payload)
