"""Cache protocol (port) for key-value storage with TTL.

Every method returns a Result; implementations translate backend exceptions
into CacheError instead of raising. Keys passed in are logical keys
(``user:<id>``); namespacing is the adapter's job.
"""

from typing import Any, Protocol

from dsagrind.core.errors import DomainError
from dsagrind.core.result import Result


class CacheProtocol(Protocol):
    """Async key-value cache with TTL and atomic increment."""

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get a string value. Success(None) when the key is absent."""
        ...

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, DomainError]:
        """Get and decode a JSON object. Success(None) when absent."""
        ...

    async def set(
        self, key: str, value: str, ttl: int | None = None
    ) -> Result[bool, DomainError]:
        """Set a string value with an optional TTL in seconds."""
        ...

    async def set_json(
        self, key: str, value: dict[str, Any], ttl: int | None = None
    ) -> Result[bool, DomainError]: ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete a key. Success(True) if it existed."""
        ...

    async def exists(self, key: str) -> Result[bool, DomainError]: ...

    async def expire(self, key: str, seconds: int) -> Result[bool, DomainError]: ...

    async def ttl(self, key: str) -> Result[int | None, DomainError]:
        """Remaining TTL in seconds, None when absent or persistent."""
        ...

    async def increment(self, key: str, amount: int = 1) -> Result[int, DomainError]:
        """Atomically increment a counter, creating it at zero."""
        ...

    async def delete_pattern(self, pattern: str) -> Result[int, DomainError]: ...

    async def ping(self) -> Result[bool, DomainError]: ...
