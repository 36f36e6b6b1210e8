"""Core errors package.

Usage:
    from dsagrind.core.errors import DomainError, ValidationError, NotFoundError
"""

from dsagrind.core.errors.common_errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from dsagrind.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthenticationError",
]
