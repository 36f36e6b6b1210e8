"""Application DTOs."""

from dsagrind.application.dtos.auth_dtos import AuthResponse, OAuthUrl, UserProjection

__all__ = ["AuthResponse", "OAuthUrl", "UserProjection"]
