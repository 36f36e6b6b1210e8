"""Login throttling rejection.

A DENIED rate-limit check is a successful limiter call returning
``allowed=False``; the login handler turns that outcome into this error.
Limiter infrastructure failures never produce it (fail-open).
"""

from dataclasses import dataclass

from dsagrind.core.errors import AuthenticationError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(AuthenticationError):
    """Too many attempts within the window.

    Attributes:
        retry_after: Seconds until the window expires, when known.
    """

    retry_after: int | None = None
