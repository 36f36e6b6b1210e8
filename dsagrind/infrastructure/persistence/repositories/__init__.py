"""Repository implementations (adapters)."""

from dsagrind.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = ["UserRepository"]
