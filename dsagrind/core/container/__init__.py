"""Container module - Centralized dependency injection.

Re-exports every factory so callers import from one place:

    from dsagrind.core.container import get_cache, get_login_handler, ...

Organized by concern:
- infrastructure: logging, Redis, database, security, email, OAuth
- events: event bus and outbound publisher
- repositories: repository factories
- auth_handlers: session lifecycle handler factories
"""

# Infrastructure services
from dsagrind.core.container.infrastructure import (
    get_cache,
    get_database,
    get_db_session,
    get_email_service,
    get_logger,
    get_oauth_client,
    get_password_service,
    get_rate_limit,
    get_redis_client,
    get_secure_token_service,
    get_token_service,
)

# Event bus
from dsagrind.core.container.events import get_event_bus, get_event_publisher

# Repositories
from dsagrind.core.container.repositories import get_user_repository

# Auth handlers
from dsagrind.core.container.auth_handlers import (
    get_change_password_handler,
    get_forgot_password_handler,
    get_generate_oauth_url_handler,
    get_get_user_handler,
    get_login_handler,
    get_logout_handler,
    get_oauth_login_handler,
    get_refresh_session_handler,
    get_register_handler,
    get_resend_verification_handler,
    get_reset_password_handler,
    get_revoke_all_tokens_handler,
    get_revoke_token_handler,
    get_session_issuer,
    get_update_profile_handler,
    get_user_cache,
    get_user_id_from_token_handler,
    get_validate_token_handler,
    get_verify_email_handler,
)

__all__ = [
    # Infrastructure
    "get_cache",
    "get_database",
    "get_db_session",
    "get_email_service",
    "get_logger",
    "get_oauth_client",
    "get_password_service",
    "get_rate_limit",
    "get_redis_client",
    "get_secure_token_service",
    "get_token_service",
    # Events
    "get_event_bus",
    "get_event_publisher",
    # Repositories
    "get_user_repository",
    # Auth handlers
    "get_change_password_handler",
    "get_forgot_password_handler",
    "get_generate_oauth_url_handler",
    "get_get_user_handler",
    "get_login_handler",
    "get_logout_handler",
    "get_oauth_login_handler",
    "get_refresh_session_handler",
    "get_register_handler",
    "get_resend_verification_handler",
    "get_reset_password_handler",
    "get_revoke_all_tokens_handler",
    "get_revoke_token_handler",
    "get_session_issuer",
    "get_update_profile_handler",
    "get_user_cache",
    "get_user_id_from_token_handler",
    "get_validate_token_handler",
    "get_verify_email_handler",
]
