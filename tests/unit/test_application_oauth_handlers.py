"""Unit tests for OAuth and token query handlers.

Tests cover:
- OAuthLoginHandler: existing link, link by email, new account with a free
  username (alice, alice1, alice2), provider handle as username seed,
  unsupported provider, exchange failure reported as OAUTH_FAILED,
  provider outages passed through unchanged
- GenerateOAuthUrlHandler: state passthrough, generated state, unknown provider
- ValidateTokenHandler / GetUserIdFromTokenHandler

Architecture:
- Mocked OAuth client and repository protocol
- Real JWT service
"""

from unittest.mock import AsyncMock

import pytest

from dsagrind.application.commands.auth_commands import OAuthLogin
from dsagrind.application.commands.handlers.oauth_login_handler import (
    OAuthLoginHandler,
)
from dsagrind.application.queries.auth_queries import (
    GenerateOAuthUrl,
    GetUserIdFromToken,
    ValidateToken,
)
from dsagrind.application.queries.handlers.generate_oauth_url_handler import (
    GenerateOAuthUrlHandler,
)
from dsagrind.application.queries.handlers.token_query_handlers import (
    GetUserIdFromTokenHandler,
    ValidateTokenHandler,
)
from dsagrind.core.enums import ErrorCode
from dsagrind.core.result import Failure, Success
from dsagrind.domain.entities import OAuthUser
from dsagrind.domain.enums import OAuthProvider
from dsagrind.domain.errors import AuthError
from dsagrind.domain.events import UserLogin, UserRegistered
from dsagrind.infrastructure.enums import InfrastructureErrorCode
from dsagrind.infrastructure.errors import ExternalServiceError
from dsagrind.infrastructure.security import JWTService
from tests.factories import create_user

IP = "203.0.113.7"


def google_identity(**overrides) -> OAuthUser:
    data = {
        "provider": OAuthProvider.GOOGLE,
        "provider_id": "g-123",
        "email": "alice@x.com",
        "first_name": "Alice",
        "last_name": "Liddell",
        "avatar": "https://example.com/a.png",
    }
    data.update(overrides)
    return OAuthUser(**data)


@pytest.fixture
def oauth_client():
    client = AsyncMock()
    client.exchange_code.return_value = Success(value=google_identity())
    return client


@pytest.fixture
def oauth_handler(user_repo, oauth_client, session_issuer, event_bus, logger):
    user_repo.save.return_value = Success(value=None)
    return OAuthLoginHandler(
        user_repo=user_repo,
        oauth_client=oauth_client,
        session_issuer=session_issuer,
        event_bus=event_bus,
        logger=logger,
    )


def oauth_command(provider: str = "google") -> OAuthLogin:
    return OAuthLogin(provider=provider, code="code-1", state="state-1", ip_address=IP)


def published(event_bus) -> list:
    return [call.args[0] for call in event_bus.publish.await_args_list]


@pytest.mark.unit
class TestOAuthLoginHandler:
    @pytest.mark.asyncio
    async def test_existing_linked_account_logs_in(
        self, oauth_handler, user_repo, oauth_client, event_bus
    ):
        # Arrange
        user = create_user(username="alice", email="alice@x.com", google_id="g-123")
        user_repo.find_by_oauth_id.return_value = user

        # Act
        result = await oauth_handler.handle(oauth_command())

        # Assert
        assert isinstance(result, Success)
        assert result.value.user.id == user.id
        oauth_client.exchange_code.assert_awaited_once_with(
            OAuthProvider.GOOGLE, "code-1", "state-1"
        )
        user_repo.find_by_oauth_id.assert_awaited_once_with(OAuthProvider.GOOGLE, "g-123")
        user_repo.update.assert_awaited_once_with(user)
        user_repo.save.assert_not_awaited()
        events = published(event_bus)
        assert [type(e) for e in events] == [UserLogin]
        assert events[0].login_method == "google"

    @pytest.mark.asyncio
    async def test_links_existing_email_account(self, oauth_handler, user_repo):
        user = create_user(username="alice", email="alice@x.com", is_email_verified=False)
        user_repo.find_by_email.return_value = user

        result = await oauth_handler.handle(oauth_command())

        assert isinstance(result, Success)
        assert user.google_id == "g-123"
        assert user.is_email_verified is True
        user_repo.find_by_email.assert_awaited_once_with("alice@x.com")
        user_repo.update.assert_awaited_once_with(user)
        user_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creates_verified_account_with_free_username(
        self, oauth_handler, user_repo, event_bus
    ):
        # Arrange: "alice" and "alice1" are taken
        taken = {"alice", "alice1"}
        user_repo.exists_by_username.side_effect = lambda name: name in taken

        # Act
        result = await oauth_handler.handle(oauth_command())

        # Assert
        assert isinstance(result, Success)
        created = user_repo.save.call_args[0][0]
        assert created.username == "alice2"
        assert created.email == "alice@x.com"
        assert created.google_id == "g-123"
        assert created.is_email_verified is True
        assert created.password_hash is None
        assert created.first_name == "Alice"
        assert created.avatar == "https://example.com/a.png"
        assert [t.token for t in created.refresh_tokens] == [result.value.refresh_token]
        assert [type(e) for e in published(event_bus)] == [UserRegistered, UserLogin]
        assert published(event_bus)[0].registration_method == "google"

    @pytest.mark.asyncio
    async def test_github_login_seeds_username_from_handle(
        self, oauth_handler, user_repo, oauth_client
    ):
        oauth_client.exchange_code.return_value = Success(
            value=OAuthUser(
                provider=OAuthProvider.GITHUB,
                provider_id="42",
                email="octo@x.com",
                username="octocat",
            )
        )

        await oauth_handler.handle(oauth_command("GitHub"))

        created = user_repo.save.call_args[0][0]
        assert created.username == "octocat"
        assert created.github_id == "42"

    @pytest.mark.asyncio
    async def test_unsupported_provider(self, oauth_handler, oauth_client):
        result = await oauth_handler.handle(oauth_command("facebook"))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.UNSUPPORTED_PROVIDER
        oauth_client.exchange_code.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exchange_failure_reported_as_oauth_failed(
        self, oauth_handler, oauth_client, user_repo, logger
    ):
        oauth_client.exchange_code.return_value = Failure(
            error=AuthError(code=ErrorCode.OAUTH_FAILED, message="Invalid or expired OAuth state")
        )

        result = await oauth_handler.handle(oauth_command())

        assert result.error.code == ErrorCode.OAUTH_FAILED
        assert result.error.message == "OAuth authentication failed"
        user_repo.find_by_oauth_id.assert_not_awaited()
        logger.warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_provider_outage_passes_through(
        self, oauth_handler, oauth_client, user_repo, logger
    ):
        outage = ExternalServiceError(
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            infrastructure_code=InfrastructureErrorCode.EXTERNAL_SERVICE_TIMEOUT,
            message="google OAuth request failed",
            service_name="google",
        )
        oauth_client.exchange_code.return_value = Failure(error=outage)

        result = await oauth_handler.handle(oauth_command())

        assert result == Failure(error=outage)
        user_repo.find_by_oauth_id.assert_not_awaited()
        logger.error.assert_called_once()
        assert logger.error.call_args.args[0] == "oauth_exchange_unavailable"


@pytest.mark.unit
class TestGenerateOAuthUrlHandler:
    @pytest.mark.asyncio
    async def test_client_state_is_passed_through(self, oauth_client):
        oauth_client.generate_authorization_url.return_value = Success(
            value="https://accounts.google.com/o/oauth2/v2/auth?state=s1"
        )
        handler = GenerateOAuthUrlHandler(oauth_client)

        result = await handler.handle(GenerateOAuthUrl(provider="google", state="s1"))

        assert result.value.state == "s1"
        assert result.value.url.startswith("https://accounts.google.com/")
        oauth_client.generate_authorization_url.assert_awaited_once_with(
            OAuthProvider.GOOGLE, "s1"
        )

    @pytest.mark.asyncio
    async def test_state_generated_when_missing(self, oauth_client):
        oauth_client.generate_authorization_url.return_value = Success(value="https://x")
        handler = GenerateOAuthUrlHandler(oauth_client)

        first = await handler.handle(GenerateOAuthUrl(provider="github"))
        second = await handler.handle(GenerateOAuthUrl(provider="github"))

        assert len(first.value.state) >= 32
        assert first.value.state != second.value.state

    @pytest.mark.asyncio
    async def test_unknown_provider(self, oauth_client):
        handler = GenerateOAuthUrlHandler(oauth_client)

        result = await handler.handle(GenerateOAuthUrl(provider="myspace"))

        assert result.error.code == ErrorCode.UNSUPPORTED_PROVIDER
        assert "google" in result.error.message


@pytest.mark.unit
class TestTokenQueryHandlers:
    @pytest.mark.asyncio
    async def test_validate_token(self, token_service):
        handler = ValidateTokenHandler(token_service)
        token = token_service.generate_access_token(create_user())

        assert await handler.handle(ValidateToken(token=token)) == Success(value=True)
        assert await handler.handle(ValidateToken(token="garbage")) == Success(value=False)

    @pytest.mark.asyncio
    async def test_user_id_from_token(self, token_service):
        user = create_user()
        handler = GetUserIdFromTokenHandler(token_service)

        result = await handler.handle(
            GetUserIdFromToken(token=token_service.generate_access_token(user))
        )

        assert result == Success(value=user.id)

    @pytest.mark.asyncio
    async def test_user_id_from_foreign_token(self, token_service):
        foreign = JWTService("some-other-secret-key-long-enough-for-hs256")
        handler = GetUserIdFromTokenHandler(token_service)

        result = await handler.handle(
            GetUserIdFromToken(token=foreign.generate_access_token(create_user()))
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
