"""OAuth client protocol (port).

The client owns the anti-CSRF ``state``: it stores the value when building
the authorization URL and validates (then consumes) it during exchange.
"""

from typing import Protocol

from dsagrind.core.errors import DomainError
from dsagrind.core.result import Result
from dsagrind.domain.entities import OAuthUser
from dsagrind.domain.enums import OAuthProvider


class OAuthClientProtocol(Protocol):
    """Authorization-code flow against an external identity provider."""

    async def generate_authorization_url(
        self, provider: OAuthProvider, state: str
    ) -> Result[str, DomainError]:
        """Store ``state`` and return the provider's authorize URL."""
        ...

    async def exchange_code(
        self, provider: OAuthProvider, code: str, state: str
    ) -> Result[OAuthUser, DomainError]:
        """Validate ``state``, exchange ``code`` and fetch the user profile."""
        ...
