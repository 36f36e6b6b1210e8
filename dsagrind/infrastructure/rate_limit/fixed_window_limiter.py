"""Redis-backed fixed-window rate limiter using an atomic Lua script.

The increment and the TTL decision run inside one Lua script (EVALSHA), so
concurrent attempts for the same key can neither leave a counter without an
expiry nor reset a window early.

Fail-open policy:
    Check and increment operations return an allowed result on Redis
    failures. Throttling must never lock every user out because the cache
    is down. ``reset`` reports real errors.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

from redis.exceptions import NoScriptError, RedisError

from dsagrind.core.enums import ErrorCode
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.errors import RateLimitError
from dsagrind.domain.protocols import LoggerProtocol, RateLimitResult


@dataclass(slots=True)
class _LuaRefs:
    """Holds loaded Lua script SHA references."""

    fixed_window_sha: str | None = None


class FixedWindowRateLimiter:
    """Fixed-window counters in Redis. Implements RateLimitProtocol.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
        logger: Logger for fail-open warnings.
        key_prefix: Namespace prepended to every counter key.
    """

    def __init__(
        self, *, redis_client: Any, logger: LoggerProtocol, key_prefix: str = ""
    ) -> None:
        self.redis = redis_client
        self._logger = logger
        self._prefix = key_prefix
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def check(
        self, key: str, limit: int
    ) -> Result[RateLimitResult, RateLimitError]:
        """Report whether ``key`` is still below ``limit`` without counting.

        A key that has reached ``limit`` is blocked until its window expires
        or it is reset.
        """
        full_key = self._key(key)
        try:
            pipe = self.redis.pipeline(transaction=False)
            pipe.get(full_key)
            pipe.pttl(full_key)
            raw_count, pttl = await pipe.execute()
        except RedisError as exc:
            self._logger.warning("rate_limit_check_failed", key=key, error=str(exc))
            return Success(value=RateLimitResult(allowed=True, count=0, remaining=limit))

        count = int(raw_count) if raw_count is not None else 0
        return Success(value=self._result(count, limit, pttl, allowed=count < limit))

    async def check_and_increment(
        self, key: str, limit: int, window_seconds: int
    ) -> Result[RateLimitResult, RateLimitError]:
        """Atomically count one attempt; the TTL is armed on the first hit.

        Returns:
            Result with allowed=True while the post-increment count is
            within ``limit``.
        """
        try:
            count, pttl = await self._run(key, window_seconds, mode="first")
        except RedisError as exc:
            self._logger.warning("rate_limit_increment_failed", key=key, error=str(exc))
            return Success(value=RateLimitResult(allowed=True, count=0, remaining=limit))

        return Success(value=self._result(count, limit, pttl, allowed=count <= limit))

    async def register_failure(
        self, key: str, window_seconds: int
    ) -> Result[int, RateLimitError]:
        """Atomically count a failed attempt and re-arm the full window.

        Returns:
            Result with the post-increment count (0 on Redis failure).
        """
        try:
            count, _ = await self._run(key, window_seconds, mode="rearm")
        except RedisError as exc:
            self._logger.warning("rate_limit_increment_failed", key=key, error=str(exc))
            return Success(value=0)
        return Success(value=count)

    async def reset(self, key: str) -> Result[bool, RateLimitError]:
        """Delete the counter. Unlike checks, reports real errors."""
        try:
            deleted = await self.redis.delete(self._key(key))
        except RedisError as exc:
            return Failure(
                error=RateLimitError(
                    code=ErrorCode.CACHE_ERROR,
                    message=f"Failed to reset rate limit for '{key}': {exc}",
                    details={"key": key},
                )
            )
        return Success(value=deleted > 0)

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    @staticmethod
    def _result(count: int, limit: int, pttl: int, *, allowed: bool) -> RateLimitResult:
        retry_after = math.ceil(pttl / 1000) if pttl and pttl > 0 else 0
        return RateLimitResult(
            allowed=allowed,
            count=count,
            remaining=max(0, limit - count),
            retry_after=retry_after,
        )

    async def _run(self, key: str, window_seconds: int, *, mode: str) -> tuple[int, int]:
        args = (1, self._key(key), int(window_seconds * 1000), mode)
        sha = await self._ensure_script()
        try:
            resp = await self.redis.evalsha(sha, *args)
        except NoScriptError:
            # Script cache flushed (restart/failover): reload once.
            self._lua.fixed_window_sha = None
            sha = await self._ensure_script()
            resp = await self.redis.evalsha(sha, *args)
        return int(resp[0]), int(resp[1])

    async def _ensure_script(self) -> str:
        """Load the fixed-window Lua script into Redis and cache the SHA."""
        if self._lua.fixed_window_sha:
            return self._lua.fixed_window_sha

        async with self._script_lock:
            if self._lua.fixed_window_sha:
                return self._lua.fixed_window_sha

            script = await _read_lua_script("lua_scripts/fixed_window.lua")
            sha: str = await self.redis.script_load(script)
            self._lua.fixed_window_sha = sha
            return sha


def _read_lua_script_sync(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read a Lua script relative to this module without blocking the loop."""
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
