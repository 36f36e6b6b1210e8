"""Integration tests for RedisAdapter and UserCache.

Tests cover:
- String and JSON get/set with TTL and key prefix
- delete/exists/expire/ttl/increment/delete_pattern/ping
- Redis failures returned as CacheError (never raised)
- UserCache: projection round trip, miss, malformed entry, invalidate,
  read and write failures treated as misses

Architecture:
- fakeredis (fakeredis.aioredis.FakeRedis), no Redis server needed
- Failure paths use a client double raising redis errors
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from dsagrind.application.dtos import UserProjection
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.result import Failure, Success
from dsagrind.infrastructure.cache import RedisAdapter
from dsagrind.infrastructure.enums import InfrastructureErrorCode
from tests.factories import create_user


@pytest.fixture
def broken_cache():
    client = AsyncMock()
    for method in ("get", "set", "setex", "delete", "exists", "ttl", "incrby", "ping"):
        getattr(client, method).side_effect = RedisConnectionError("connection refused")
    return RedisAdapter(redis_client=client, key_prefix="test:")


@pytest.mark.integration
class TestRedisAdapter:
    @pytest.mark.asyncio
    async def test_set_and_get_string(self, cache, redis_client):
        assert await cache.set("greeting", "hello") == Success(value=True)

        assert await cache.get("greeting") == Success(value="hello")
        assert await redis_client.get("test:greeting") == b"hello"

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self, cache):
        assert await cache.get("missing") == Success(value=None)
        assert await cache.get_json("missing") == Success(value=None)

    @pytest.mark.asyncio
    async def test_json_round_trip_with_ttl(self, cache):
        await cache.set_json("user:1", {"id": "1", "skills": ["dp"]}, ttl=1800)

        assert await cache.get_json("user:1") == Success(value={"id": "1", "skills": ["dp"]})
        ttl = (await cache.ttl("user:1")).value
        assert 1790 < ttl <= 1800

    @pytest.mark.asyncio
    async def test_invalid_json_is_cache_error(self, cache):
        await cache.set("user:1", "{not json")

        result = await cache.get_json("user:1")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CACHE_ERROR

    @pytest.mark.asyncio
    async def test_delete_exists_expire(self, cache):
        await cache.set("k", "v")

        assert await cache.exists("k") == Success(value=True)
        assert await cache.ttl("k") == Success(value=None)
        assert await cache.expire("k", 60) == Success(value=True)
        assert (await cache.ttl("k")).value > 0
        assert await cache.delete("k") == Success(value=True)
        assert await cache.delete("k") == Success(value=False)
        assert await cache.exists("k") == Success(value=False)

    @pytest.mark.asyncio
    async def test_increment(self, cache):
        assert await cache.increment("counter") == Success(value=1)
        assert await cache.increment("counter", 4) == Success(value=5)

    @pytest.mark.asyncio
    async def test_delete_pattern_only_matches_prefix(self, cache, redis_client):
        await cache.set("user:1", "a")
        await cache.set("user:2", "b")
        await cache.set("other:1", "c")
        await redis_client.set("user:3", "unprefixed")

        result = await cache.delete_pattern("user:*")

        assert result == Success(value=2)
        assert await cache.exists("other:1") == Success(value=True)
        assert await redis_client.get("user:3") == b"unprefixed"

    @pytest.mark.asyncio
    async def test_ping(self, cache):
        assert await cache.ping() == Success(value=True)

    @pytest.mark.asyncio
    async def test_redis_failures_become_cache_errors(self, broken_cache):
        get_result = await broken_cache.get("k")
        set_result = await broken_cache.set("k", "v", ttl=5)
        ping_result = await broken_cache.ping()

        assert get_result.error.code == ErrorCode.CACHE_ERROR
        assert get_result.error.infrastructure_code == InfrastructureErrorCode.CACHE_GET_ERROR
        assert set_result.error.infrastructure_code == InfrastructureErrorCode.CACHE_SET_ERROR
        assert ping_result.error.infrastructure_code == InfrastructureErrorCode.CACHE_CONNECTION_ERROR
        assert get_result.error.details["key"] == "k"


@pytest.mark.integration
class TestUserCache:
    @pytest.mark.asyncio
    async def test_projection_round_trip(self, cache, logger):
        user_cache = UserCache(cache=cache, logger=logger, ttl_seconds=1800)
        user = create_user(first_name="Bob", google_id="g-1")
        user.record_login()
        projection = UserProjection.from_user(user)

        await user_cache.set(projection)

        assert await user_cache.get(user.id) == projection

    @pytest.mark.asyncio
    async def test_entry_stored_under_user_key_with_ttl(self, cache, redis_client, logger):
        user_cache = UserCache(cache=cache, logger=logger, ttl_seconds=1800)
        projection = UserProjection.from_user(create_user())

        await user_cache.set(projection)

        assert 0 < await redis_client.ttl(f"test:user:{projection.id}") <= 1800

    @pytest.mark.asyncio
    async def test_invalidate_removes_entry(self, cache, logger):
        user_cache = UserCache(cache=cache, logger=logger, ttl_seconds=1800)
        projection = UserProjection.from_user(create_user())
        await user_cache.set(projection)

        await user_cache.invalidate(projection.id)

        assert await user_cache.get(projection.id) is None

    @pytest.mark.asyncio
    async def test_malformed_entry_is_a_miss(self, cache, logger):
        user_cache = UserCache(cache=cache, logger=logger, ttl_seconds=1800)
        user = create_user()
        await cache.set_json(f"user:{user.id}", {"id": str(user.id)})

        assert await user_cache.get(user.id) is None
        assert logger.warning.call_args[0][0] == "user_cache_entry_invalid"

    @pytest.mark.asyncio
    async def test_cache_outage_is_a_miss(self, broken_cache, logger):
        user_cache = UserCache(cache=broken_cache, logger=logger, ttl_seconds=1800)
        projection = UserProjection.from_user(create_user())

        await user_cache.set(projection)
        await user_cache.invalidate(projection.id)

        assert await user_cache.get(projection.id) is None
        events = [call.args[0] for call in logger.warning.call_args_list]
        assert events == [
            "user_cache_write_failed",
            "user_cache_invalidate_failed",
            "user_cache_read_failed",
        ]
