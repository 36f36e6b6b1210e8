"""Event bus and outbound publishing adapters."""

from dsagrind.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from dsagrind.infrastructure.events.logging_event_publisher import (
    LoggingEventPublisher,
)
from dsagrind.infrastructure.events.topic_forwarder import TopicForwarder

__all__ = ["InMemoryEventBus", "LoggingEventPublisher", "TopicForwarder"]
