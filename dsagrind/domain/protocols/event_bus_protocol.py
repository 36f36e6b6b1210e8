"""Event bus protocol (port).

Publishing is fire-and-forget from the caller's perspective: implementations
log handler failures and never raise them into the publishing operation.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from dsagrind.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBusProtocol(Protocol):
    """Publish/subscribe for domain events."""

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type`` (and its subclasses)."""
        ...

    async def publish(
        self, event: DomainEvent, metadata: dict[str, Any] | None = None
    ) -> None:
        """Deliver ``event`` to every subscribed handler."""
        ...
