"""Per-provider OAuth endpoints and credentials.

A lookup table keyed by OAuthProvider replaces branching on provider
names. Endpoints are fixed per provider; credentials come from Settings.
"""

from dataclasses import dataclass, field

from dsagrind.domain.enums import OAuthProvider


@dataclass(frozen=True, slots=True, kw_only=True)
class OAuthProviderSettings:
    """Static configuration for one provider.

    Attributes:
        authorize_url: User-facing consent page.
        token_url: Code-for-token exchange endpoint.
        user_info_url: Profile endpoint (bearer token).
        scope: Space-separated scopes requested.
        extra_authorize_params: Provider-specific authorize parameters.
        emails_url: Fallback endpoint for the email address (GitHub only).
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    authorize_url: str
    token_url: str
    user_info_url: str
    scope: str
    extra_authorize_params: dict[str, str] = field(default_factory=dict)
    emails_url: str | None = None


def build_provider_settings(
    *,
    google_client_id: str,
    google_client_secret: str,
    google_redirect_uri: str,
    github_client_id: str,
    github_client_secret: str,
    github_redirect_uri: str,
) -> dict[OAuthProvider, OAuthProviderSettings]:
    """Build the provider table from credentials."""
    return {
        OAuthProvider.GOOGLE: OAuthProviderSettings(
            client_id=google_client_id,
            client_secret=google_client_secret,
            redirect_uri=google_redirect_uri,
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            user_info_url="https://www.googleapis.com/oauth2/v2/userinfo",
            scope="openid profile email",
            extra_authorize_params={
                "access_type": "offline",
                "include_granted_scopes": "true",
            },
        ),
        OAuthProvider.GITHUB: OAuthProviderSettings(
            client_id=github_client_id,
            client_secret=github_client_secret,
            redirect_uri=github_redirect_uri,
            authorize_url="https://github.com/login/oauth/authorize",
            token_url="https://github.com/login/oauth/access_token",
            user_info_url="https://api.github.com/user",
            scope="user:email",
            emails_url="https://api.github.com/user/emails",
        ),
    }
