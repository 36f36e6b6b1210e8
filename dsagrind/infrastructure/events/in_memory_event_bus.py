"""In-memory event bus implementation.

Dictionary-based handler registry for single-process deployments. Handlers
registered for a base class (e.g. DomainEvent) also receive its subclasses,
which is how the topic forwarder sees every event.

Architecture:
    - Implements EventBusProtocol (hexagonal adapter pattern)
    - Fail-open: one handler failure doesn't break others or the publisher
    - Concurrent handler execution (asyncio.gather)

Usage:
    >>> bus = InMemoryEventBus(logger=logger)
    >>> bus.subscribe(UserRegistered, send_welcome_metrics)
    >>> await bus.publish(UserRegistered(user_id=uid, username="bob", email="b@x.com"))
"""

import asyncio
from collections import defaultdict
from typing import Any

from dsagrind.domain.events import DomainEvent
from dsagrind.domain.protocols import EventHandler, LoggerProtocol


class InMemoryEventBus:
    """In-memory event bus with fail-open behavior.

    Attributes:
        _handlers: Event class -> async handlers.
        _logger: Logger for handler failures and event publishing.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._logger = logger

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type`` and its subclasses.

        No duplicate detection: registering twice delivers twice.
        """
        self._handlers[event_type].append(handler)

    def _handlers_for(self, event: DomainEvent) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for cls in type(event).__mro__:
            handlers.extend(self._handlers.get(cls, []))
        return handlers

    async def publish(
        self, event: DomainEvent, metadata: dict[str, Any] | None = None
    ) -> None:
        """Publish event to all registered handlers.

        Flow:
            1. Collect handlers for the event class and its bases
            2. No handlers: no-op
            3. Run handlers with asyncio.gather(return_exceptions=True)
            4. Log each failure at warning level, never raise
        """
        handlers = self._handlers_for(event)
        if not handlers:
            return

        self._logger.debug(
            "event_publishing",
            event_type=event.event_type,
            event_id=str(event.event_id),
            handler_count=len(handlers),
            **(metadata or {}),
        )

        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event.event_type,
                    event_id=str(event.event_id),
                    handler_name=getattr(handler, "__qualname__", repr(handler)),
                    error_type=type(result).__name__,
                    error_message=str(result),
                )
