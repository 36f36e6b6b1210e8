"""Authentication handler dependency factories.

Request-scoped handler instances for the session lifecycle:
- Login, registration, refresh, revoke, logout
- Email verification, password reset and change
- OAuth login and authorization URLs
- User projection, profile and token queries

FastAPI caches dependencies per request, so every factory in one request
shares the same UserRepository and database session.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Depends

from dsagrind.core.config import settings
from dsagrind.core.container.events import get_event_bus
from dsagrind.core.container.infrastructure import (
    get_cache,
    get_email_service,
    get_logger,
    get_oauth_client,
    get_password_service,
    get_rate_limit,
    get_secure_token_service,
    get_token_service,
)
from dsagrind.core.container.repositories import get_user_repository

if TYPE_CHECKING:
    from dsagrind.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
    )
    from dsagrind.application.commands.handlers.forgot_password_handler import (
        ForgotPasswordHandler,
    )
    from dsagrind.application.commands.handlers.login_handler import LoginHandler
    from dsagrind.application.commands.handlers.logout_handler import LogoutHandler
    from dsagrind.application.commands.handlers.oauth_login_handler import (
        OAuthLoginHandler,
    )
    from dsagrind.application.commands.handlers.refresh_session_handler import (
        RefreshSessionHandler,
    )
    from dsagrind.application.commands.handlers.register_handler import (
        RegisterHandler,
    )
    from dsagrind.application.commands.handlers.resend_verification_handler import (
        ResendVerificationHandler,
    )
    from dsagrind.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )
    from dsagrind.application.commands.handlers.revoke_all_tokens_handler import (
        RevokeAllTokensHandler,
    )
    from dsagrind.application.commands.handlers.revoke_token_handler import (
        RevokeTokenHandler,
    )
    from dsagrind.application.commands.handlers.update_profile_handler import (
        UpdateProfileHandler,
    )
    from dsagrind.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )
    from dsagrind.application.queries.handlers.generate_oauth_url_handler import (
        GenerateOAuthUrlHandler,
    )
    from dsagrind.application.queries.handlers.get_user_handler import (
        GetUserHandler,
    )
    from dsagrind.application.queries.handlers.token_query_handlers import (
        GetUserIdFromTokenHandler,
        ValidateTokenHandler,
    )
    from dsagrind.application.services import SessionIssuer, UserCache
    from dsagrind.infrastructure.persistence.repositories import UserRepository


# ============================================================================
# Shared Services
# ============================================================================


@lru_cache()
def get_user_cache() -> "UserCache":
    """User projection cache (app-scoped)."""
    from dsagrind.application.services import UserCache

    return UserCache(
        cache=get_cache(),
        logger=get_logger(),
        ttl_seconds=settings.user_cache_ttl_minutes * 60,
    )


async def get_session_issuer(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "SessionIssuer":
    """Session issuer bound to the request's repository."""
    from dsagrind.application.services import SessionIssuer

    return SessionIssuer(
        user_repo=user_repo,
        token_service=get_token_service(),
        secure_token_service=get_secure_token_service(),
        user_cache=get_user_cache(),
        refresh_token_days=settings.refresh_token_expire_days,
        max_active_refresh_tokens=settings.max_active_refresh_tokens,
    )


# ============================================================================
# Command Handler Factories
# ============================================================================


async def get_login_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_issuer: "SessionIssuer" = Depends(get_session_issuer),
) -> "LoginHandler":
    """Get Login command handler (request-scoped).

    Usage:
        @router.post("/login")
        async def login(handler: LoginHandler = Depends(get_login_handler)):
            result = await handler.handle(command)
    """
    from dsagrind.application.commands.handlers.login_handler import LoginHandler

    return LoginHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        rate_limiter=get_rate_limit(),
        session_issuer=session_issuer,
        event_bus=get_event_bus(),
        logger=get_logger(),
        attempts_limit=settings.login_attempts_limit,
        window_seconds=settings.login_attempts_window_minutes * 60,
    )


async def get_register_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_issuer: "SessionIssuer" = Depends(get_session_issuer),
) -> "RegisterHandler":
    from dsagrind.application.commands.handlers.register_handler import (
        RegisterHandler,
    )

    return RegisterHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        secure_token_service=get_secure_token_service(),
        session_issuer=session_issuer,
        email_service=get_email_service(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_refresh_session_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_issuer: "SessionIssuer" = Depends(get_session_issuer),
) -> "RefreshSessionHandler":
    from dsagrind.application.commands.handlers.refresh_session_handler import (
        RefreshSessionHandler,
    )

    return RefreshSessionHandler(
        user_repo=user_repo,
        session_issuer=session_issuer,
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_revoke_token_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "RevokeTokenHandler":
    from dsagrind.application.commands.handlers.revoke_token_handler import (
        RevokeTokenHandler,
    )

    return RevokeTokenHandler(
        user_repo=user_repo,
        user_cache=get_user_cache(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_logout_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "LogoutHandler":
    from dsagrind.application.commands.handlers.logout_handler import LogoutHandler

    return LogoutHandler(
        user_repo=user_repo,
        user_cache=get_user_cache(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_revoke_all_tokens_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "RevokeAllTokensHandler":
    from dsagrind.application.commands.handlers.revoke_all_tokens_handler import (
        RevokeAllTokensHandler,
    )

    return RevokeAllTokensHandler(
        user_repo=user_repo,
        user_cache=get_user_cache(),
        logger=get_logger(),
    )


async def get_verify_email_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "VerifyEmailHandler":
    from dsagrind.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )

    return VerifyEmailHandler(
        user_repo=user_repo,
        user_cache=get_user_cache(),
        email_service=get_email_service(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_resend_verification_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "ResendVerificationHandler":
    from dsagrind.application.commands.handlers.resend_verification_handler import (
        ResendVerificationHandler,
    )

    return ResendVerificationHandler(
        user_repo=user_repo,
        secure_token_service=get_secure_token_service(),
        email_service=get_email_service(),
        logger=get_logger(),
    )


async def get_forgot_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "ForgotPasswordHandler":
    from dsagrind.application.commands.handlers.forgot_password_handler import (
        ForgotPasswordHandler,
    )

    return ForgotPasswordHandler(
        user_repo=user_repo,
        secure_token_service=get_secure_token_service(),
        email_service=get_email_service(),
        event_bus=get_event_bus(),
        logger=get_logger(),
        reset_expire_hours=settings.password_reset_expire_hours,
    )


async def get_reset_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "ResetPasswordHandler":
    from dsagrind.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )

    return ResetPasswordHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        user_cache=get_user_cache(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_change_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "ChangePasswordHandler":
    from dsagrind.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
    )

    return ChangePasswordHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        user_cache=get_user_cache(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


async def get_oauth_login_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_issuer: "SessionIssuer" = Depends(get_session_issuer),
) -> "OAuthLoginHandler":
    from dsagrind.application.commands.handlers.oauth_login_handler import (
        OAuthLoginHandler,
    )

    return OAuthLoginHandler(
        user_repo=user_repo,
        oauth_client=get_oauth_client(),
        session_issuer=session_issuer,
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


# ============================================================================
# Query Handler Factories
# ============================================================================


async def get_get_user_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "GetUserHandler":
    from dsagrind.application.queries.handlers.get_user_handler import (
        GetUserHandler,
    )

    return GetUserHandler(user_repo=user_repo, user_cache=get_user_cache())


async def get_update_profile_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    get_user_handler: "GetUserHandler" = Depends(get_get_user_handler),
) -> "UpdateProfileHandler":
    from dsagrind.application.commands.handlers.update_profile_handler import (
        UpdateProfileHandler,
    )

    return UpdateProfileHandler(
        user_repo=user_repo,
        user_cache=get_user_cache(),
        get_user_handler=get_user_handler,
        logger=get_logger(),
    )


def get_validate_token_handler() -> "ValidateTokenHandler":
    from dsagrind.application.queries.handlers.token_query_handlers import (
        ValidateTokenHandler,
    )

    return ValidateTokenHandler(token_service=get_token_service())


def get_user_id_from_token_handler() -> "GetUserIdFromTokenHandler":
    from dsagrind.application.queries.handlers.token_query_handlers import (
        GetUserIdFromTokenHandler,
    )

    return GetUserIdFromTokenHandler(token_service=get_token_service())


def get_generate_oauth_url_handler() -> "GenerateOAuthUrlHandler":
    from dsagrind.application.queries.handlers.generate_oauth_url_handler import (
        GenerateOAuthUrlHandler,
    )

    return GenerateOAuthUrlHandler(oauth_client=get_oauth_client())
