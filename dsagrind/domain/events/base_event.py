"""Base domain event class.

Domain events are immutable records of things that happened, named in the
past tense. ``event_id`` is a UUIDv7 so ids sort by creation time.

Usage:
    >>> @dataclass(frozen=True, kw_only=True)
    ... class UserRegistered(DomainEvent):
    ...     user_id: UUID
    ...     email: str
    >>>
    >>> event = UserRegistered(user_id=uuid7(), email="bob@x.com")
    >>> event.event_type
    'UserRegistered'
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance (UUIDv7).
        occurred_at: When the event occurred (UTC).
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Event name used on the outbound topic."""
        return type(self).__name__

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible payload for outbound publishing."""
        payload: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if isinstance(value, Enum):
                payload[key] = value.value
            elif isinstance(value, UUID):
                payload[key] = str(value)
            elif isinstance(value, datetime):
                payload[key] = value.isoformat()
            else:
                payload[key] = value
        payload["event_type"] = self.event_type
        return payload
