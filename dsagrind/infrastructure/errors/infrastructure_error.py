"""Infrastructure layer error types.

Adapters catch backend exceptions and return these as Result failures.
They inherit from DomainError (not Exception) and carry both the domain
ErrorCode and an InfrastructureErrorCode for diagnostics.
"""

from dataclasses import dataclass
from typing import Any

from dsagrind.core.errors import DomainError
from dsagrind.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        infrastructure_code: Original infrastructure error code.
        details: Additional context (key, operation, original error).
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Wraps Redis exceptions."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalServiceError(InfrastructureError):
    """External HTTP service failure (OAuth providers, mail relay).

    Attributes:
        service_name: Name of the external service.
    """

    service_name: str
