"""Rate limit protocol (port).

Fixed-window counters keyed by an identifier such as
``login_attempts:<email>``. Implementations must increment atomically in the
backing store and fail open on infrastructure errors.
"""

from dataclasses import dataclass
from typing import Protocol

from dsagrind.core.result import Result
from dsagrind.domain.errors import RateLimitError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitResult:
    """Outcome of a rate limit check.

    Attributes:
        allowed: True while the count is within the limit.
        count: Current count in the window.
        remaining: Attempts left before the limit is reached.
        retry_after: Seconds until the window resets (0 when unknown).
    """

    allowed: bool
    count: int
    remaining: int
    retry_after: int = 0


class RateLimitProtocol(Protocol):
    """Fixed-window rate limiter."""

    async def check(
        self, key: str, limit: int
    ) -> Result[RateLimitResult, RateLimitError]:
        """Report whether ``key`` is below ``limit`` without incrementing."""
        ...

    async def check_and_increment(
        self, key: str, limit: int, window_seconds: int
    ) -> Result[RateLimitResult, RateLimitError]:
        """Atomically increment; start the window TTL on the first hit."""
        ...

    async def register_failure(
        self, key: str, window_seconds: int
    ) -> Result[int, RateLimitError]:
        """Atomically increment and re-arm the TTL to the full window."""
        ...

    async def reset(self, key: str) -> Result[bool, RateLimitError]: ...
