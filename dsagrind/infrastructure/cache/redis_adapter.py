"""Redis adapter implementing CacheProtocol.

Wraps an async Redis client, namespaces every key with a configurable
prefix, and maps Redis exceptions to CacheError results.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Returns Result types for all operations
- Callers decide whether a cache failure matters (most do not)
"""

import json
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from dsagrind.core.enums import ErrorCode
from dsagrind.core.result import Failure, Result, Success
from dsagrind.infrastructure.enums import InfrastructureErrorCode
from dsagrind.infrastructure.errors import CacheError


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Attributes:
        _redis: Async Redis client instance.
        _prefix: Namespace prepended to every key.
    """

    def __init__(self, redis_client: Redis, key_prefix: str = "") -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance.
            key_prefix: Namespace such as "dsagrind:".
        """
        self._redis = redis_client
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    @staticmethod
    def _failure(
        infrastructure_code: InfrastructureErrorCode,
        message: str,
        key: str,
        error: Exception,
    ) -> Failure[CacheError]:
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_ERROR,
                infrastructure_code=infrastructure_code,
                message=message,
                details={"key": key, "error": str(error), "type": type(error).__name__},
            )
        )

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        try:
            value = await self._redis.get(self._key(key))
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to get key '{key}' from cache",
                key,
                e,
            )
        if value is None:
            return Success(value=None)
        return Success(value=value.decode("utf-8") if isinstance(value, bytes) else value)

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, CacheError]:
        """Get JSON value from Redis.

        Returns:
            Result with parsed dict if found, None if not found, or CacheError.
        """
        result = await self.get(key)

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=raw):
                try:
                    return Success(value=json.loads(raw))
                except json.JSONDecodeError as e:
                    return self._failure(
                        InfrastructureErrorCode.CACHE_GET_ERROR,
                        f"Failed to parse JSON for key '{key}'",
                        key,
                        e,
                    )
            case Failure(error=err):
                return Failure(error=err)
            case _:
                return Success(value=None)

    async def set(
        self, key: str, value: str, ttl: int | None = None
    ) -> Result[bool, CacheError]:
        """Set value in Redis.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiration).
        """
        try:
            if ttl is not None:
                await self._redis.setex(self._key(key), ttl, value)
            else:
                await self._redis.set(self._key(key), value)
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                f"Failed to set key '{key}' in cache",
                key,
                e,
            )
        return Success(value=True)

    async def set_json(
        self, key: str, value: dict[str, Any], ttl: int | None = None
    ) -> Result[bool, CacheError]:
        try:
            serialized = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                f"Failed to serialize JSON for key '{key}'",
                key,
                e,
            )
        return await self.set(key, serialized, ttl=ttl)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        try:
            deleted = await self._redis.delete(self._key(key))
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_DELETE_ERROR,
                f"Failed to delete key '{key}' from cache",
                key,
                e,
            )
        return Success(value=deleted > 0)

    async def exists(self, key: str) -> Result[bool, CacheError]:
        try:
            count = await self._redis.exists(self._key(key))
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to check key '{key}'",
                key,
                e,
            )
        return Success(value=count > 0)

    async def expire(self, key: str, seconds: int) -> Result[bool, CacheError]:
        try:
            updated = await self._redis.expire(self._key(key), seconds)
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                f"Failed to set expiry on key '{key}'",
                key,
                e,
            )
        return Success(value=bool(updated))

    async def ttl(self, key: str) -> Result[int | None, CacheError]:
        """Remaining TTL in seconds.

        Redis reports -2 for a missing key and -1 for a key without expiry;
        both map to None.
        """
        try:
            remaining = await self._redis.ttl(self._key(key))
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to read TTL of key '{key}'",
                key,
                e,
            )
        return Success(value=remaining if remaining >= 0 else None)

    async def increment(self, key: str, amount: int = 1) -> Result[int, CacheError]:
        """Atomic INCRBY."""
        try:
            value = await self._redis.incrby(self._key(key), amount)
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                f"Failed to increment key '{key}'",
                key,
                e,
            )
        return Success(value=int(value))

    async def delete_pattern(self, pattern: str) -> Result[int, CacheError]:
        """Delete every key matching ``pattern`` using SCAN (never KEYS)."""
        deleted = 0
        try:
            async for raw_key in self._redis.scan_iter(match=self._key(pattern)):
                deleted += await self._redis.delete(raw_key)
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_DELETE_ERROR,
                f"Failed to delete keys matching '{pattern}'",
                pattern,
                e,
            )
        return Success(value=deleted)

    async def ping(self) -> Result[bool, CacheError]:
        try:
            return Success(value=bool(await self._redis.ping()))
        except RedisError as e:
            return self._failure(
                InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                "Cache ping failed",
                "",
                e,
            )
