"""Centralized constants for internal implementation details.

Constants here are fixed by the wire and storage formats, NOT environment
configuration. For environment-specific settings use `dsagrind.core.config`.

Example:
    >>> from dsagrind.core.constants import REFRESH_TOKEN_BYTES
    >>> raw = secrets.token_bytes(REFRESH_TOKEN_BYTES)
"""

# =============================================================================
# Token Lengths
# =============================================================================

REFRESH_TOKEN_BYTES: int = 64
"""Random bytes in an opaque refresh token (before base64 encoding)."""

VERIFICATION_TOKEN_BYTES: int = 32
"""Random bytes in email-verification and password-reset tokens."""

# =============================================================================
# Reported Lifetimes
# =============================================================================

REPORTED_ACCESS_TOKEN_MINUTES: int = 15
"""Access-token expiry reported to clients in auth responses.

The signed token carries its own exp (access_token_expire_minutes), which
may differ. Clients are told to refresh after this many minutes.
"""

# =============================================================================
# Cache and Rate-Limit Keys
# =============================================================================

USER_CACHE_KEY: str = "user:{user_id}"
"""Cache key for the user projection."""

LOGIN_ATTEMPTS_KEY: str = "login_attempts:{email}"
"""Rate-limit counter key for failed logins by email."""

OAUTH_STATE_KEY: str = "oauth_state:{state}"
"""Cache key holding the provider bound to an anti-CSRF state value."""

# =============================================================================
# Methods
# =============================================================================

PASSWORD_LOGIN_METHOD: str = "password"
"""login_method recorded on UserLogin events for credential logins."""

# =============================================================================
# Limits
# =============================================================================

USERNAME_SUFFIX_LIMIT: int = 10_000
"""Upper bound on numeric suffixes tried when deriving an OAuth username."""
