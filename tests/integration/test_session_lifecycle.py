"""End-to-end session lifecycle through the real handlers.

Tests cover:
- Register -> VerifyEmail (token taken from the sent email) -> Login
- Login blocked until the email is verified
- Reset revokes everything: every earlier refresh token fails refresh and revoke
- Refresh-token cap holds across repeated logins and refreshes
- A rotated refresh token cannot be used again
- Login throttling shared across email case variants

Architecture:
- Real handlers, bcrypt and JWT services
- SQLAlchemy UserRepository on SQLite (aiosqlite), one session per request
- User cache and rate limiter on fakeredis; stub email service with outbox
"""

from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
import pytest_asyncio

from dsagrind.application.commands.auth_commands import (
    ForgotPassword,
    Login,
    RefreshSession,
    Register,
    ResetPassword,
    RevokeToken,
    VerifyEmail,
)
from dsagrind.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from dsagrind.application.commands.handlers.login_handler import LoginHandler
from dsagrind.application.commands.handlers.refresh_session_handler import (
    RefreshSessionHandler,
)
from dsagrind.application.commands.handlers.register_handler import RegisterHandler
from dsagrind.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from dsagrind.application.commands.handlers.revoke_token_handler import (
    RevokeTokenHandler,
)
from dsagrind.application.commands.handlers.verify_email_handler import (
    VerifyEmailHandler,
)
from dsagrind.application.services import SessionIssuer, UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.result import Failure, Success
from dsagrind.infrastructure.cache import RedisAdapter
from dsagrind.infrastructure.email import StubEmailService
from dsagrind.infrastructure.events import InMemoryEventBus
from dsagrind.infrastructure.persistence import BaseModel, Database
from dsagrind.infrastructure.persistence.repositories import UserRepository
from dsagrind.infrastructure.rate_limit import FixedWindowRateLimiter
from dsagrind.infrastructure.security import JWTService, SecureTokenService
from tests.factories import TEST_JWT_SECRET

IP = "203.0.113.7"
PASSWORD = "Secret123!"


class AuthFlow:
    """Runs each command in its own database session, as a request would."""

    def __init__(self, database, password_service, redis_client) -> None:
        self.database = database
        self.logger = Mock()
        self.password_service = password_service
        self.token_service = JWTService(TEST_JWT_SECRET, expiration_minutes=60)
        self.secure_tokens = SecureTokenService()
        self.user_cache = UserCache(
            cache=RedisAdapter(redis_client=redis_client, key_prefix="test:"),
            logger=self.logger,
            ttl_seconds=1800,
        )
        self.rate_limiter = FixedWindowRateLimiter(
            redis_client=redis_client, logger=self.logger
        )
        self.event_bus = InMemoryEventBus(logger=self.logger)
        self.email = StubEmailService(
            logger=self.logger, frontend_url="https://dsagrind.test"
        )

    def _issuer(self, repo: UserRepository) -> SessionIssuer:
        return SessionIssuer(
            user_repo=repo,
            token_service=self.token_service,
            secure_token_service=self.secure_tokens,
            user_cache=self.user_cache,
            refresh_token_days=7,
            max_active_refresh_tokens=5,
        )

    async def _run(self, build, command):
        async with self.database.async_session() as session:
            return await build(UserRepository(session)).handle(command)

    async def register(self, username: str = "bob", email: str = "bob@x.com"):
        return await self._run(
            lambda repo: RegisterHandler(
                user_repo=repo,
                password_service=self.password_service,
                secure_token_service=self.secure_tokens,
                session_issuer=self._issuer(repo),
                email_service=self.email,
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            Register(username=username, email=email, password=PASSWORD, ip_address=IP),
        )

    async def verify(self, token: str):
        return await self._run(
            lambda repo: VerifyEmailHandler(
                user_repo=repo,
                user_cache=self.user_cache,
                email_service=self.email,
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            VerifyEmail(token=token),
        )

    async def login(self, email: str = "bob@x.com", password: str = PASSWORD):
        return await self._run(
            lambda repo: LoginHandler(
                user_repo=repo,
                password_service=self.password_service,
                rate_limiter=self.rate_limiter,
                session_issuer=self._issuer(repo),
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            Login(email=email, password=password, ip_address=IP),
        )

    async def refresh(self, refresh_token: str):
        return await self._run(
            lambda repo: RefreshSessionHandler(
                user_repo=repo,
                session_issuer=self._issuer(repo),
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            RefreshSession(refresh_token=refresh_token, ip_address=IP),
        )

    async def revoke(self, refresh_token: str):
        return await self._run(
            lambda repo: RevokeTokenHandler(
                user_repo=repo,
                user_cache=self.user_cache,
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            RevokeToken(refresh_token=refresh_token, ip_address=IP),
        )

    async def forgot(self, email: str = "bob@x.com"):
        return await self._run(
            lambda repo: ForgotPasswordHandler(
                user_repo=repo,
                secure_token_service=self.secure_tokens,
                email_service=self.email,
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            ForgotPassword(email=email, ip_address=IP),
        )

    async def reset(self, token: str, new_password: str):
        return await self._run(
            lambda repo: ResetPasswordHandler(
                user_repo=repo,
                password_service=self.password_service,
                user_cache=self.user_cache,
                event_bus=self.event_bus,
                logger=self.logger,
            ),
            ResetPassword(token=token, new_password=new_password, ip_address=IP),
        )

    async def stored_user(self, email: str = "bob@x.com"):
        async with self.database.async_session() as session:
            return await UserRepository(session).find_by_email(email)

    def link_token(self, path: str) -> str:
        """Token query parameter of the last emailed link to ``path``."""
        for message in reversed(self.email.outbox):
            if message.link and urlparse(message.link).path == path:
                return parse_qs(urlparse(message.link).query)["token"][0]
        raise AssertionError(f"no email with a {path} link")

    async def verified_account(self) -> str:
        """Register and verify bob; return the registration refresh token."""
        registered = await self.register()
        assert isinstance(registered, Success)
        assert await self.verify(self.link_token("/verify-email")) == Success(value=True)
        return registered.value.refresh_token


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'lifecycle.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    yield db
    await db.close()


@pytest.fixture
def flow(database, password_service, redis_client):
    return AuthFlow(database, password_service, redis_client)


@pytest.mark.integration
class TestRegisterVerifyLogin:
    @pytest.mark.asyncio
    async def test_register_verify_then_login(self, flow):
        # Arrange
        registered = await flow.register()
        assert isinstance(registered, Success)

        # Act
        verified = await flow.verify(flow.link_token("/verify-email"))
        logged_in = await flow.login()

        # Assert
        assert verified == Success(value=True)
        assert isinstance(logged_in, Success)
        assert logged_in.value.refresh_token != registered.value.refresh_token
        assert logged_in.value.user.is_email_verified is True
        user = await flow.stored_user()
        assert user.is_email_verified
        assert user.email_verification_token is None
        assert user.find_refresh_token(logged_in.value.refresh_token).is_active

    @pytest.mark.asyncio
    async def test_login_blocked_until_verified(self, flow):
        await flow.register()

        blocked = await flow.login()

        assert isinstance(blocked, Failure)
        assert blocked.error.code == ErrorCode.EMAIL_NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_verification_token_is_single_use(self, flow):
        await flow.register()
        token = flow.link_token("/verify-email")

        assert await flow.verify(token) == Success(value=True)
        again = await flow.verify(token)

        assert again.error.code == ErrorCode.TOKEN_NOT_FOUND


@pytest.mark.integration
class TestResetRevokesEverything:
    @pytest.mark.asyncio
    async def test_every_earlier_refresh_token_is_dead(self, flow):
        # Arrange: registration token plus three logins
        tokens = [await flow.verified_account()]
        for _ in range(3):
            tokens.append((await flow.login()).value.refresh_token)
        assert await flow.forgot() == Success(value=True)

        # Act
        reset = await flow.reset(flow.link_token("/reset-password"), "NewPass1!")

        # Assert
        assert reset == Success(value=True)
        for token in tokens:
            refreshed = await flow.refresh(token)
            assert refreshed.error.code == ErrorCode.TOKEN_INVALID
            revoked = await flow.revoke(token)
            assert revoked.error.code == ErrorCode.TOKEN_NOT_FOUND
        assert (await flow.stored_user()).active_refresh_tokens == []

    @pytest.mark.asyncio
    async def test_only_new_password_logs_in(self, flow):
        await flow.verified_account()
        await flow.forgot()

        await flow.reset(flow.link_token("/reset-password"), "NewPass1!")

        old = await flow.login(password=PASSWORD)
        assert old.error.code == ErrorCode.INVALID_CREDENTIALS
        assert isinstance(await flow.login(password="NewPass1!"), Success)


@pytest.mark.integration
class TestRefreshTokenCap:
    @pytest.mark.asyncio
    async def test_cap_holds_across_logins_and_refreshes(self, flow):
        # Arrange
        issued = [await flow.verified_account()]
        for _ in range(6):
            issued.append((await flow.login()).value.refresh_token)

        # Assert: only the five newest survive
        user = await flow.stored_user()
        assert sorted(t.token for t in user.active_refresh_tokens) == sorted(issued[-5:])
        assert (await flow.refresh(issued[0])).error.code == ErrorCode.TOKEN_INVALID

        # Act: rotate the newest twice
        current = issued[-1]
        for _ in range(2):
            rotated = await flow.refresh(current)
            assert isinstance(rotated, Success)
            current = rotated.value.refresh_token

        # Assert
        user = await flow.stored_user()
        assert len(user.active_refresh_tokens) == 5
        assert user.find_refresh_token(current).is_active

    @pytest.mark.asyncio
    async def test_rotated_token_cannot_be_reused(self, flow):
        first = await flow.verified_account()

        rotated = await flow.refresh(first)
        reused = await flow.refresh(first)

        assert isinstance(rotated, Success)
        assert reused.error.code == ErrorCode.TOKEN_INVALID
        user = await flow.stored_user()
        assert user.find_refresh_token(first).replaced_by_token == rotated.value.refresh_token


@pytest.mark.integration
class TestLoginThrottlingOnStore:
    @pytest.mark.asyncio
    async def test_case_variants_share_the_attempt_counter(self, flow):
        await flow.verified_account()
        variants = ["bob@x.com", "Bob@x.com", "BOB@x.com", "bob@X.com", "bOB@X.COM"]

        for email in variants:
            failed = await flow.login(email=email, password="wrong")
            assert failed.error.code == ErrorCode.INVALID_CREDENTIALS
        blocked = await flow.login(email="BoB@x.com")

        assert blocked.error.code == ErrorCode.RATE_LIMITED
