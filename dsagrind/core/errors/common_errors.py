"""Common error classes used across all layers.

Error Types:
- ValidationError: Input validation failures
- NotFoundError: Resource not found (the "soft" failure tier)
- ConflictError: Uniqueness conflicts (email/username already taken)
- AuthenticationError: Authentication failures

Usage:
    return Failure(error=NotFoundError(
        code=ErrorCode.USER_NOT_FOUND,
        message="User not found",
        resource_type="User",
        resource_id=str(user_id),
    ))
"""

from dataclasses import dataclass

from dsagrind.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (User, RefreshToken, ...).
        resource_id: Identifier that was looked up. Never a raw secret.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate unique value).

    Attributes:
        resource_type: Type of resource.
        conflicting_field: Field that caused the conflict.
    """

    resource_type: str
    conflicting_field: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (credentials, tokens, OAuth exchange)."""

    pass

