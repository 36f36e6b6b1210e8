"""Pytest configuration and shared fixtures.

This configuration ensures:
1. Settings load without a .env file (test values set before any import)
2. Async tests are marked automatically
3. Handlers are built from real security services and mocked repositories
4. Redis-backed components run against fakeredis (no server required)
"""

import asyncio
import os
from unittest.mock import AsyncMock, Mock

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("BCRYPT_ROUNDS", "10")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fakeredis.aioredis import FakeRedis  # noqa: E402

from dsagrind.application.services import SessionIssuer, UserCache  # noqa: E402
from dsagrind.infrastructure.cache import RedisAdapter  # noqa: E402
from dsagrind.infrastructure.security import (  # noqa: E402
    BcryptPasswordService,
    JWTService,
    SecureTokenService,
)
from tests.factories import TEST_JWT_SECRET  # noqa: E402


# =============================================================================
# Pytest hooks
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with fakeredis, SQLite or mocked HTTP"
    )
    config.addinivalue_line("markers", "api: HTTP tests against the FastAPI app")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def logger():
    """Logger double accepting the LoggerProtocol methods."""
    return Mock()


@pytest.fixture(scope="session")
def password_service():
    """Real bcrypt service at the lowest supported cost."""
    return BcryptPasswordService(cost_factor=10)


@pytest.fixture
def token_service():
    return JWTService(TEST_JWT_SECRET, expiration_minutes=60)


@pytest.fixture
def secure_token_service():
    return SecureTokenService()


@pytest.fixture
def user_repo():
    """Mocked UserRepository protocol (every lookup misses by default)."""
    repo = AsyncMock()
    repo.find_by_id.return_value = None
    repo.find_by_email.return_value = None
    repo.find_by_username.return_value = None
    repo.find_by_refresh_token.return_value = None
    repo.find_by_verification_token.return_value = None
    repo.find_by_reset_token.return_value = None
    repo.find_by_oauth_id.return_value = None
    repo.exists_by_email.return_value = False
    repo.exists_by_username.return_value = False
    repo.revoke_all_refresh_tokens.return_value = 0
    return repo


@pytest.fixture
def event_bus():
    return AsyncMock()


@pytest.fixture
def user_cache():
    return AsyncMock(spec=UserCache)


@pytest.fixture
def session_issuer(user_repo, token_service, secure_token_service, user_cache):
    return SessionIssuer(
        user_repo=user_repo,
        token_service=token_service,
        secure_token_service=secure_token_service,
        user_cache=user_cache,
        refresh_token_days=7,
        max_active_refresh_tokens=5,
    )


# =============================================================================
# Redis (fakeredis)
# =============================================================================


@pytest_asyncio.fixture
async def redis_client():
    """In-process Redis with Lua support; fresh per test."""
    client = FakeRedis()
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def cache(redis_client):
    return RedisAdapter(redis_client=redis_client, key_prefix="test:")
