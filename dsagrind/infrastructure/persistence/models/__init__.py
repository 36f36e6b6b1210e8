"""Database models."""

from dsagrind.infrastructure.persistence.models.refresh_token import RefreshToken
from dsagrind.infrastructure.persistence.models.user import User

__all__ = ["RefreshToken", "User"]
