"""Cache adapters."""

from dsagrind.infrastructure.cache.redis_adapter import RedisAdapter

__all__ = ["RedisAdapter"]
