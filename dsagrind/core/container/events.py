# mypy: disable-error-code="arg-type"
"""Event bus dependency factory.

Application-scoped singleton for domain event publishing. Every domain
event is forwarded to the outbound user events topic.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dsagrind.domain.protocols import EventBusProtocol, EventPublisherProtocol


@lru_cache()
def get_event_publisher() -> "EventPublisherProtocol":
    """Outbound topic publisher (logging publisher until a broker is wired)."""
    from dsagrind.core.container.infrastructure import get_logger
    from dsagrind.infrastructure.events import LoggingEventPublisher

    return LoggingEventPublisher(logger=get_logger())


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Subscriptions:
        DomainEvent -> TopicForwarder(events_topic)

    Usage:
        event_bus = get_event_bus()
        await event_bus.publish(UserRegistered(...))
    """
    from dsagrind.core.config import get_settings
    from dsagrind.core.container.infrastructure import get_logger
    from dsagrind.domain.events import DomainEvent
    from dsagrind.infrastructure.events import InMemoryEventBus, TopicForwarder

    settings = get_settings()
    event_bus = InMemoryEventBus(logger=get_logger())
    event_bus.subscribe(
        DomainEvent,
        TopicForwarder(publisher=get_event_publisher(), topic=settings.events_topic),
    )
    return event_bus
