"""User lifecycle domain events.

Published on the user events topic after the state change they describe has
been persisted. Handlers must not assume delivery: publish failures are
logged and swallowed by the publisher.

Events never carry passwords, hashes or token values.
"""

from dataclasses import dataclass
from uuid import UUID

from dsagrind.domain.events.base_event import DomainEvent


# ═══════════════════════════════════════════════════════════════
# Registration and Verification
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserRegistered(DomainEvent):
    """Account created (password registration or first OAuth login).

    Attributes:
        user_id: New user's id.
        username: Chosen or derived username.
        email: Account email.
        registration_method: "password" or the OAuth provider name.
    """

    user_id: UUID
    username: str
    email: str
    registration_method: str = "password"


@dataclass(frozen=True, kw_only=True)
class UserEmailVerified(DomainEvent):
    """Verification token consumed."""

    user_id: UUID
    email: str


# ═══════════════════════════════════════════════════════════════
# Sessions
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserLogin(DomainEvent):
    """Session issued.

    Attributes:
        user_id: Authenticated user.
        username: Username at login time.
        ip_address: Client IP.
        login_method: "password", "google" or "github".
    """

    user_id: UUID
    username: str
    ip_address: str
    login_method: str


@dataclass(frozen=True, kw_only=True)
class UserLogout(DomainEvent):
    """Refresh token revoked through explicit logout."""

    user_id: UUID
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class RefreshTokenRevoked(DomainEvent):
    """Single refresh token revoked.

    Attributes:
        user_id: Token owner.
        ip_address: Client IP performing the revocation.
        rotated: True when revoked by rotation (a successor was issued).
    """

    user_id: UUID
    ip_address: str
    rotated: bool = False


# ═══════════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class PasswordResetRequested(DomainEvent):
    """Reset token issued and emailed."""

    user_id: UUID
    email: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class PasswordResetCompleted(DomainEvent):
    """Password replaced via reset token; all sessions revoked."""

    user_id: UUID
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class PasswordChanged(DomainEvent):
    """Password changed by an authenticated user; sessions kept."""

    user_id: UUID
