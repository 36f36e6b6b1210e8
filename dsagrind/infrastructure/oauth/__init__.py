"""OAuth provider client (authorization-code flow)."""

from dsagrind.infrastructure.oauth.httpx_oauth_client import HttpxOAuthClient
from dsagrind.infrastructure.oauth.provider_settings import (
    OAuthProviderSettings,
    build_provider_settings,
)

__all__ = ["HttpxOAuthClient", "OAuthProviderSettings", "build_provider_settings"]
