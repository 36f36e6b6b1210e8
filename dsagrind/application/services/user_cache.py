"""User projection cache.

Wraps the key-value cache for ``user:<id>`` entries. The cache is an
optimization only: read failures count as misses and write or delete
failures are logged, never returned to the caller.

Usage:
    cache = UserCache(cache=redis_adapter, logger=logger, ttl_seconds=1800)
    projection = await cache.get(user_id)   # None on miss or failure
    await cache.set(projection)
    await cache.invalidate(user_id)
"""

from uuid import UUID

from dsagrind.application.dtos import UserProjection
from dsagrind.core.constants import USER_CACHE_KEY
from dsagrind.core.result import Failure, Success
from dsagrind.domain.protocols import CacheProtocol, LoggerProtocol


class UserCache:
    """Cache-aside store for UserProjection."""

    def __init__(
        self,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        ttl_seconds: int,
    ) -> None:
        self._cache = cache
        self._logger = logger
        self._ttl_seconds = ttl_seconds

    async def get(self, user_id: UUID) -> UserProjection | None:
        key = USER_CACHE_KEY.format(user_id=user_id)
        match await self._cache.get_json(key):
            case Success(value=None):
                return None
            case Success(value=data):
                try:
                    return UserProjection.from_dict(data)
                except (KeyError, TypeError, ValueError) as e:
                    self._logger.warning(
                        "user_cache_entry_invalid",
                        user_id=str(user_id),
                        error_message=str(e),
                    )
                    return None
            case Failure(error=error):
                self._logger.warning(
                    "user_cache_read_failed",
                    user_id=str(user_id),
                    error_code=error.code.value,
                )
                return None

    async def set(self, projection: UserProjection) -> None:
        key = USER_CACHE_KEY.format(user_id=projection.id)
        result = await self._cache.set_json(
            key, projection.to_dict(), ttl=self._ttl_seconds
        )
        if isinstance(result, Failure):
            self._logger.warning(
                "user_cache_write_failed",
                user_id=str(projection.id),
                error_code=result.error.code.value,
            )

    async def invalidate(self, user_id: UUID) -> None:
        key = USER_CACHE_KEY.format(user_id=user_id)
        result = await self._cache.delete(key)
        if isinstance(result, Failure):
            self._logger.warning(
                "user_cache_invalidate_failed",
                user_id=str(user_id),
                error_code=result.error.code.value,
            )
