"""Domain-level error codes (machine-readable).

Categories:
- Validation errors (VALIDATION_*, UNSUPPORTED_*)
- Authentication errors (INVALID_CREDENTIALS, TOKEN_*, OAUTH_*)
- Throttling (RATE_LIMITED)
- Conflict errors (*_TAKEN)
- Resource errors (*_NOT_FOUND)
- Infrastructure passthrough (CACHE_*, DATABASE_*, EXTERNAL_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    UNSUPPORTED_PROVIDER = "unsupported_provider"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    OAUTH_FAILED = "oauth_failed"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_STALE = "token_stale"
    PASSWORD_NOT_SET = "password_not_set"

    # Throttling
    RATE_LIMITED = "rate_limited"

    # Conflict errors
    EMAIL_TAKEN = "email_taken"
    USERNAME_TAKEN = "username_taken"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    TOKEN_NOT_FOUND = "token_not_found"

    # Infrastructure passthrough
    CACHE_ERROR = "cache_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
