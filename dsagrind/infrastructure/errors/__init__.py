"""Infrastructure error types."""

from dsagrind.infrastructure.errors.infrastructure_error import (
    CacheError,
    ExternalServiceError,
    InfrastructureError,
)

__all__ = [
    "CacheError",
    "ExternalServiceError",
    "InfrastructureError",
]
