"""Token generation protocol for the domain layer.

Token Strategy:
    - Access tokens: signed JWT, stateless validation
    - Refresh tokens: opaque random values (SecureTokenProtocol)
"""

from typing import Any, Protocol
from uuid import UUID

from dsagrind.core.errors import DomainError
from dsagrind.core.result import Result
from dsagrind.domain.entities import User


class TokenGenerationProtocol(Protocol):
    """Access token issuance and validation."""

    def generate_access_token(self, user: User) -> str:
        """Issue a signed access token carrying identity, role and plan claims."""
        ...

    def validate_access_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Verify signature, algorithm, issuer, audience and expiry.

        Returns:
            Success(claims) or Failure(AuthError) (TOKEN_EXPIRED / TOKEN_INVALID).
        """
        ...

    def decode_expired_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Decode a token whose only defect is expiry."""
        ...

    def get_claim(self, token: str, name: str) -> Any | None:
        """Claim value from a valid token, None on any failure."""
        ...

    def get_user_id(self, token: str) -> UUID | None:
        """Subject of a valid token, None on any failure."""
        ...


class SecureTokenProtocol(Protocol):
    """Opaque random token generation."""

    def generate_refresh_token(self) -> str: ...

    def generate_verification_token(self) -> str: ...

    def generate_reset_token(self) -> str: ...
