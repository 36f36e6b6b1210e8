"""Unit tests for registration and refresh-token lifecycle handlers.

Tests cover:
- RegisterHandler: session issued, unverified account, hashing, verification
  email, event, uniqueness conflicts (pre-check and store race), email
  failure does not fail registration
- RefreshSessionHandler: rotation, predecessor revoked, replaced-by chain,
  inactive/unknown token, lost concurrent rotation
- RevokeTokenHandler / LogoutHandler: revoke, soft not-found
- RevokeAllTokensHandler: counts, unknown user

Architecture:
- Unit tests for application handlers (mocked repository protocol)
- Real bcrypt, JWT and secure-token services
"""

from unittest.mock import AsyncMock

import pytest

from dsagrind.application.commands.auth_commands import (
    Logout,
    RefreshSession,
    Register,
    RevokeAllTokens,
    RevokeToken,
)
from dsagrind.application.commands.handlers.logout_handler import LogoutHandler
from dsagrind.application.commands.handlers.refresh_session_handler import (
    RefreshSessionError,
    RefreshSessionHandler,
)
from dsagrind.application.commands.handlers.register_handler import (
    RegistrationError,
    RegisterHandler,
)
from dsagrind.application.commands.handlers.revoke_all_tokens_handler import (
    RevokeAllTokensHandler,
)
from dsagrind.application.commands.handlers.revoke_token_handler import (
    RevokeTokenHandler,
)
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import ConflictError, NotFoundError
from dsagrind.core.result import Failure, Success
from dsagrind.domain.events import RefreshTokenRevoked, UserLogout, UserRegistered
from tests.factories import create_refresh_token, create_user

IP = "203.0.113.7"


# =============================================================================
# Register
# =============================================================================


@pytest.fixture
def email_service():
    return AsyncMock()


@pytest.fixture
def register_handler(
    user_repo,
    password_service,
    secure_token_service,
    session_issuer,
    email_service,
    event_bus,
    logger,
):
    user_repo.save.return_value = Success(value=None)
    return RegisterHandler(
        user_repo=user_repo,
        password_service=password_service,
        secure_token_service=secure_token_service,
        session_issuer=session_issuer,
        email_service=email_service,
        event_bus=event_bus,
        logger=logger,
    )


def register_command(**overrides) -> Register:
    data = {
        "username": "bob",
        "email": "bob@x.com",
        "password": "Secret123!",
        "first_name": "Bob",
        "ip_address": IP,
    }
    data.update(overrides)
    return Register(**data)


@pytest.mark.unit
class TestRegisterHandler:
    @pytest.mark.asyncio
    async def test_register_creates_unverified_user_with_session(
        self, register_handler, user_repo, password_service
    ):
        # Act
        result = await register_handler.handle(register_command())

        # Assert
        assert isinstance(result, Success)
        saved_user = user_repo.save.call_args[0][0]
        assert saved_user.username == "bob"
        assert saved_user.is_email_verified is False
        assert saved_user.email_verification_token
        assert saved_user.password_hash != "Secret123!"
        assert password_service.verify_password("Secret123!", saved_user.password_hash)
        assert [t.token for t in saved_user.refresh_tokens] == [result.value.refresh_token]
        assert saved_user.refresh_tokens[0].created_by_ip == IP
        assert result.value.user.is_email_verified is False

    @pytest.mark.asyncio
    async def test_register_sends_verification_email_and_publishes(
        self, register_handler, user_repo, email_service, event_bus
    ):
        await register_handler.handle(register_command())

        saved_user = user_repo.save.call_args[0][0]
        email_service.send_email_verification.assert_awaited_once_with(
            "bob@x.com", "bob", saved_user.email_verification_token
        )
        event = event_bus.publish.call_args[0][0]
        assert isinstance(event, UserRegistered)
        assert event.registration_method == "password"

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_registration(
        self, register_handler, email_service, logger
    ):
        email_service.send_email_verification.side_effect = RuntimeError("smtp down")

        result = await register_handler.handle(register_command())

        assert isinstance(result, Success)
        logger.error.assert_called_once()
        assert logger.error.call_args[0][0] == "email_send_failed"

    @pytest.mark.asyncio
    async def test_taken_email_returns_conflict(self, register_handler, user_repo):
        user_repo.exists_by_email.return_value = True

        result = await register_handler.handle(register_command())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.EMAIL_TAKEN
        assert result.error.message == RegistrationError.EMAIL_TAKEN
        user_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_taken_username_returns_conflict(self, register_handler, user_repo):
        user_repo.exists_by_username.return_value = True

        result = await register_handler.handle(register_command())

        assert result.error.code == ErrorCode.USERNAME_TAKEN
        assert result.error.conflicting_field == "username"

    @pytest.mark.asyncio
    async def test_store_conflict_from_concurrent_registration(
        self, register_handler, user_repo, email_service, event_bus
    ):
        conflict = ConflictError(
            code=ErrorCode.EMAIL_TAKEN,
            message="Email already registered",
            resource_type="User",
            conflicting_field="email",
        )
        user_repo.save.return_value = Failure(error=conflict)

        result = await register_handler.handle(register_command())

        assert result == Failure(error=conflict)
        email_service.send_email_verification.assert_not_awaited()
        event_bus.publish.assert_not_awaited()


# =============================================================================
# Refresh
# =============================================================================


@pytest.fixture
def refresh_handler(user_repo, session_issuer, event_bus, logger):
    user_repo.rotate_refresh_token.return_value = True
    return RefreshSessionHandler(
        user_repo=user_repo,
        session_issuer=session_issuer,
        event_bus=event_bus,
        logger=logger,
    )


@pytest.mark.unit
class TestRefreshSessionHandler:
    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, refresh_handler, user_repo, event_bus):
        # Arrange
        user = create_user()
        user.refresh_tokens = [create_refresh_token(token="r1")]
        user_repo.find_by_refresh_token.return_value = user

        # Act
        result = await refresh_handler.handle(
            RefreshSession(refresh_token="r1", ip_address="198.51.100.2")
        )

        # Assert
        assert isinstance(result, Success)
        new_value = result.value.refresh_token
        assert new_value != "r1"
        old = user.find_refresh_token("r1")
        assert old.is_revoked
        assert old.revoked_by_ip == "198.51.100.2"
        assert old.replaced_by_token == new_value
        assert user.find_refresh_token(new_value).is_active

        old_arg, successor, ip = user_repo.rotate_refresh_token.call_args[0]
        assert old_arg == "r1"
        assert successor.token == new_value
        assert ip == "198.51.100.2"

        event = event_bus.publish.call_args[0][0]
        assert isinstance(event, RefreshTokenRevoked)
        assert event.rotated is True

    @pytest.mark.asyncio
    async def test_refresh_does_not_prune(self, refresh_handler, user_repo):
        user = create_user()
        user.refresh_tokens = [create_refresh_token(token=f"r{i}") for i in range(5)]
        user_repo.find_by_refresh_token.return_value = user

        await refresh_handler.handle(RefreshSession(refresh_token="r0", ip_address=IP))

        assert len(user.refresh_tokens) == 6
        assert len(user.active_refresh_tokens) == 5
        user_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_token_is_invalid(self, refresh_handler):
        result = await refresh_handler.handle(
            RefreshSession(refresh_token="nope", ip_address=IP)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
        assert result.error.message == RefreshSessionError.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_revoked_token_is_invalid(self, refresh_handler, user_repo):
        user = create_user()
        token = create_refresh_token(token="r1")
        token.revoke(IP, replaced_by_token="r2")
        user.refresh_tokens = [token]
        user_repo.find_by_refresh_token.return_value = user

        result = await refresh_handler.handle(
            RefreshSession(refresh_token="r1", ip_address=IP)
        )

        assert result.error.code == ErrorCode.TOKEN_INVALID
        user_repo.rotate_refresh_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_rotation_race_is_stale(self, refresh_handler, user_repo, event_bus):
        user = create_user()
        user.refresh_tokens = [create_refresh_token(token="r1")]
        user_repo.find_by_refresh_token.return_value = user
        user_repo.rotate_refresh_token.return_value = False

        result = await refresh_handler.handle(
            RefreshSession(refresh_token="r1", ip_address=IP)
        )

        assert result.error.code == ErrorCode.TOKEN_STALE
        assert user.find_refresh_token("r1").is_active
        event_bus.publish.assert_not_awaited()


# =============================================================================
# Revoke / Logout / Revoke all
# =============================================================================


@pytest.mark.unit
class TestRevokeTokenHandler:
    @pytest.mark.asyncio
    async def test_revoke_active_token(self, user_repo, user_cache, event_bus, logger):
        user = create_user()
        user_repo.find_by_refresh_token.return_value = user
        user_repo.revoke_refresh_token.return_value = True
        handler = RevokeTokenHandler(user_repo, user_cache, event_bus, logger)

        result = await handler.handle(RevokeToken(refresh_token="r1", ip_address=IP))

        assert result == Success(value=True)
        user_repo.revoke_refresh_token.assert_awaited_once_with("r1", IP)
        user_cache.invalidate.assert_awaited_once_with(user.id)
        event = event_bus.publish.call_args[0][0]
        assert isinstance(event, RefreshTokenRevoked)
        assert event.rotated is False

    @pytest.mark.asyncio
    async def test_revoke_unknown_token_is_soft_not_found(
        self, user_repo, user_cache, event_bus, logger
    ):
        handler = RevokeTokenHandler(user_repo, user_cache, event_bus, logger)

        result = await handler.handle(RevokeToken(refresh_token="nope", ip_address=IP))

        assert isinstance(result.error, NotFoundError)
        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND

    @pytest.mark.asyncio
    async def test_revoke_already_revoked_token_is_soft_not_found(
        self, user_repo, user_cache, event_bus, logger
    ):
        user_repo.find_by_refresh_token.return_value = create_user()
        user_repo.revoke_refresh_token.return_value = False
        handler = RevokeTokenHandler(user_repo, user_cache, event_bus, logger)

        result = await handler.handle(RevokeToken(refresh_token="r1", ip_address=IP))

        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND
        event_bus.publish.assert_not_awaited()


@pytest.mark.unit
class TestLogoutHandler:
    @pytest.mark.asyncio
    async def test_logout_revokes_and_publishes(
        self, user_repo, user_cache, event_bus, logger
    ):
        user = create_user()
        user_repo.find_by_refresh_token.return_value = user
        user_repo.revoke_refresh_token.return_value = True
        handler = LogoutHandler(user_repo, user_cache, event_bus, logger)

        result = await handler.handle(Logout(refresh_token="r1", ip_address=IP))

        assert result == Success(value=True)
        event = event_bus.publish.call_args[0][0]
        assert isinstance(event, UserLogout)
        assert event.user_id == user.id

    @pytest.mark.asyncio
    async def test_logout_unknown_token(self, user_repo, user_cache, event_bus, logger):
        handler = LogoutHandler(user_repo, user_cache, event_bus, logger)

        result = await handler.handle(Logout(refresh_token="nope", ip_address=IP))

        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND
        user_repo.revoke_refresh_token.assert_not_awaited()


@pytest.mark.unit
class TestRevokeAllTokensHandler:
    @pytest.mark.asyncio
    async def test_revoke_all_for_existing_user(self, user_repo, user_cache, logger):
        user = create_user()
        user_repo.find_by_id.return_value = user
        user_repo.revoke_all_refresh_tokens.return_value = 3
        handler = RevokeAllTokensHandler(user_repo, user_cache, logger)

        result = await handler.handle(RevokeAllTokens(user_id=user.id, ip_address=IP))

        assert result == Success(value=True)
        user_repo.revoke_all_refresh_tokens.assert_awaited_once_with(user.id, IP)
        user_cache.invalidate.assert_awaited_once_with(user.id)

    @pytest.mark.asyncio
    async def test_revoke_all_with_no_active_tokens_still_succeeds(
        self, user_repo, user_cache, logger
    ):
        user = create_user()
        user_repo.find_by_id.return_value = user
        user_repo.revoke_all_refresh_tokens.return_value = 0
        handler = RevokeAllTokensHandler(user_repo, user_cache, logger)

        result = await handler.handle(RevokeAllTokens(user_id=user.id, ip_address=IP))

        assert result == Success(value=True)

    @pytest.mark.asyncio
    async def test_revoke_all_unknown_user(self, user_repo, user_cache, logger):
        handler = RevokeAllTokensHandler(user_repo, user_cache, logger)

        result = await handler.handle(
            RevokeAllTokens(user_id=create_user().id, ip_address=IP)
        )

        assert result.error.code == ErrorCode.USER_NOT_FOUND
        user_repo.revoke_all_refresh_tokens.assert_not_awaited()
