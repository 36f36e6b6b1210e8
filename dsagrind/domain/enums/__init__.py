"""Domain enums.

Available Enums:
    - UserRole: Account roles (user, admin)
    - OAuthProvider: Supported third-party identity providers
"""

from dsagrind.domain.enums.oauth_provider import OAuthProvider
from dsagrind.domain.enums.user_role import UserRole

__all__ = ["OAuthProvider", "UserRole"]
