# mypy: disable-error-code="arg-type"
"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console/JSON)
- Redis client, cache and rate limiter
- Database (PostgreSQL via asyncpg)
- Password hashing (bcrypt), JWT signing, opaque token generation
- Email (stub)
- OAuth client (httpx)

Settings are read here, in the composition root, and passed into
constructors; nothing below the container reads ambient settings.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from dsagrind.core.config import settings
from dsagrind.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from dsagrind.domain.protocols import (
        CacheProtocol,
        EmailProtocol,
        LoggerProtocol,
        OAuthClientProtocol,
        PasswordHashingProtocol,
        RateLimitProtocol,
        SecureTokenProtocol,
        TokenGenerationProtocol,
    )


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get logger singleton (app-scoped).

    JSON output everywhere except development, where the console renderer
    is easier to read.
    """
    from dsagrind.infrastructure.logging import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_redis_client() -> "Redis":
    """Get the shared Redis client (app-scoped, pooled)."""
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns:
        RedisAdapter namespaced by ``redis_key_prefix``.

    Usage:
        # Presentation Layer (FastAPI Depends)
        cache: CacheProtocol = Depends(get_cache)
    """
    from dsagrind.infrastructure.cache import RedisAdapter

    return RedisAdapter(
        redis_client=get_redis_client(),
        key_prefix=settings.redis_key_prefix,
    )


@lru_cache()
def get_rate_limit() -> "RateLimitProtocol":
    """Get rate limiter singleton (app-scoped).

    Fail-Open Design:
        Redis failures return allowed results and log a warning. Rate
        limiting never blocks logins because the cache is down.
    """
    from dsagrind.infrastructure.rate_limit import FixedWindowRateLimiter

    return FixedWindowRateLimiter(
        redis_client=get_redis_client(),
        logger=get_logger(),
        key_prefix=settings.redis_key_prefix,
    )


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Prefer get_db_session() for per-request sessions.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Commits on success, rolls back on exception, always closes.

    Usage:
        @router.post("/users")
        async def create_user(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get bcrypt password service singleton (cost from ``bcrypt_rounds``)."""
    from dsagrind.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


@lru_cache()
def get_token_service() -> "TokenGenerationProtocol":
    """Get JWT token service singleton (app-scoped)."""
    from dsagrind.infrastructure.security import JWTService

    return JWTService(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expiration_minutes=settings.access_token_expire_minutes,
        clock_skew_seconds=settings.jwt_clock_skew_seconds,
    )


@lru_cache()
def get_secure_token_service() -> "SecureTokenProtocol":
    from dsagrind.infrastructure.security import SecureTokenService

    return SecureTokenService()


# ============================================================================
# Email and OAuth (Application-Scoped)
# ============================================================================


@lru_cache()
def get_email_service() -> "EmailProtocol":
    """Get email service singleton (app-scoped).

    Every environment uses StubEmailService until a delivery adapter is
    configured; it renders the templates and logs them.
    """
    from dsagrind.infrastructure.email import StubEmailService

    return StubEmailService(
        logger=get_logger(),
        frontend_url=settings.frontend_url,
        app_name=settings.app_name,
        reset_expire_hours=settings.password_reset_expire_hours,
    )


@lru_cache()
def get_oauth_client() -> "OAuthClientProtocol":
    """Get OAuth client singleton (app-scoped)."""
    from dsagrind.infrastructure.oauth import HttpxOAuthClient, build_provider_settings

    return HttpxOAuthClient(
        providers=build_provider_settings(
            google_client_id=settings.google_client_id,
            google_client_secret=settings.google_client_secret,
            google_redirect_uri=settings.google_redirect_uri,
            github_client_id=settings.github_client_id,
            github_client_secret=settings.github_client_secret,
            github_redirect_uri=settings.github_redirect_uri,
        ),
        cache=get_cache(),
        logger=get_logger(),
        state_ttl_seconds=settings.oauth_state_ttl_minutes * 60,
        timeout=settings.oauth_http_timeout_seconds,
        user_agent=settings.app_name,
    )
