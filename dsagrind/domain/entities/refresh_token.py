"""Refresh token entity.

An opaque, random session credential owned by exactly one user. Tokens are
revoked, never deleted, when rotated or logged out, so the revocation chain
(``replaced_by_token``) stays auditable.
"""

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass
class RefreshToken:
    """Refresh token embedded in a User.

    Attributes:
        token: Opaque token value (base64 of 64 random bytes). Unique.
        expires: Expiry timestamp (UTC).
        created: Issuance timestamp (UTC).
        created_by_ip: Client IP that obtained the token.
        revoked: Revocation timestamp, None while not revoked.
        revoked_by_ip: Client IP that revoked the token.
        replaced_by_token: Successor token value when rotated.

    Example:
        >>> token = RefreshToken(
        ...     token="b64...",
        ...     expires=datetime.now(UTC) + timedelta(days=7),
        ...     created=datetime.now(UTC),
        ...     created_by_ip="203.0.113.7",
        ... )
        >>> token.is_active
        True
    """

    token: str
    expires: datetime
    created: datetime
    created_by_ip: str
    revoked: datetime | None = None
    revoked_by_ip: str | None = None
    replaced_by_token: str | None = None

    @property
    def is_expired(self) -> bool:
        """True once the current time reaches the expiry."""
        return datetime.now(UTC) >= self.expires

    @property
    def is_revoked(self) -> bool:
        return self.revoked is not None

    @property
    def is_active(self) -> bool:
        """Active means not revoked and not yet expired."""
        return not self.is_revoked and not self.is_expired

    def revoke(self, ip_address: str, replaced_by_token: str | None = None) -> None:
        """Mark this token revoked.

        Args:
            ip_address: Client IP performing the revocation.
            replaced_by_token: Successor value when revoked by rotation.
        """
        self.revoked = datetime.now(UTC)
        self.revoked_by_ip = ip_address
        self.replaced_by_token = replaced_by_token
