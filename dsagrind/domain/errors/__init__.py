"""Domain-specific error types.

Usage:
    from dsagrind.domain.errors import AuthError, RateLimitError
"""

from dsagrind.domain.errors.auth_error import AuthError
from dsagrind.domain.errors.rate_limit_error import RateLimitError

__all__ = ["AuthError", "RateLimitError"]
