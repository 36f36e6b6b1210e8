"""Authorization-tier failures of the session lifecycle.

Hard failures the HTTP layer maps to 401/403 responses: bad credentials,
unverified email, invalid or stale refresh token, failed OAuth exchange.

Usage:
    return Failure(error=AuthError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message="Invalid email or password",
    ))
"""

from dataclasses import dataclass

from dsagrind.core.errors import AuthenticationError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthError(AuthenticationError):
    """Credential or token rejected.

    Attributes:
        code: INVALID_CREDENTIALS, EMAIL_NOT_VERIFIED, TOKEN_INVALID,
            TOKEN_EXPIRED, TOKEN_STALE or OAUTH_FAILED.
        message: Client-safe message. Never says which check failed
            for INVALID_CREDENTIALS.
    """

    pass
