"""Authentication queries (CQRS read operations).

Queries represent requests for data. They are immutable dataclasses with
question-like names and do NOT emit domain events.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class GetUser:
    """Get the user projection (cache first).

    Example:
        >>> result = await handler.handle(GetUser(user_id=user_id))
    """

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ValidateToken:
    """Is this access token currently valid?"""

    token: str


@dataclass(frozen=True, kw_only=True)
class GetUserIdFromToken:
    """Resolve the subject of a valid access token."""

    token: str


@dataclass(frozen=True, kw_only=True)
class GenerateOAuthUrl:
    """Build a provider authorization URL.

    Attributes:
        provider: Provider name as received ("google", "github").
        state: Client-supplied anti-CSRF state; generated when None.
    """

    provider: str
    state: str | None = None
