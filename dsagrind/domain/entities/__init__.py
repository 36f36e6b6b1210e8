"""Domain entities."""

from dsagrind.domain.entities.oauth_user import OAuthUser
from dsagrind.domain.entities.refresh_token import RefreshToken
from dsagrind.domain.entities.user import (
    NotificationSettings,
    User,
    UserPreferences,
    UserProfile,
)

__all__ = [
    "NotificationSettings",
    "OAuthUser",
    "RefreshToken",
    "User",
    "UserPreferences",
    "UserProfile",
]
