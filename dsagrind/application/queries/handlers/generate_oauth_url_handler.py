"""GenerateOAuthUrl query handler.

Resolves the provider name and asks the OAuth client for the authorization
URL. The client stores the state for ``oauth_state_ttl_minutes`` so the
callback can validate it.
"""

import secrets

from dsagrind.application.dtos import OAuthUrl
from dsagrind.application.queries.auth_queries import GenerateOAuthUrl
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError, ValidationError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.enums import OAuthProvider
from dsagrind.domain.protocols import OAuthClientProtocol


def unsupported_provider(name: str) -> ValidationError:
    return ValidationError(
        code=ErrorCode.UNSUPPORTED_PROVIDER,
        message=(
            f"Unsupported OAuth provider: {name}. "
            f"Supported: {', '.join(OAuthProvider.values())}"
        ),
        field="provider",
    )


class GenerateOAuthUrlHandler:
    """Handler for the GenerateOAuthUrl query."""

    def __init__(self, oauth_client: OAuthClientProtocol) -> None:
        self._oauth_client = oauth_client

    async def handle(self, query: GenerateOAuthUrl) -> Result[OAuthUrl, DomainError]:
        provider = OAuthProvider.parse(query.provider)
        if provider is None:
            return Failure(error=unsupported_provider(query.provider))

        state = query.state or secrets.token_urlsafe(32)
        match await self._oauth_client.generate_authorization_url(provider, state):
            case Success(value=url):
                return Success(value=OAuthUrl(url=url, state=state))
            case Failure(error=error):
                return Failure(error=error)
