"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic and return Result types
- Field validation (email format, lengths) happens in the request schemas
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID


# ═══════════════════════════════════════════════════════════════
# Credentials and Sessions
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class Login:
    """Log in with email and password.

    Attributes:
        email: Account email.
        password: Plain-text password (never logged).
        ip_address: Client IP, stamped on the issued refresh token.

    Example:
        >>> command = Login(
        ...     email="bob@x.com",
        ...     password="Secret123!",
        ...     ip_address="203.0.113.7",
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class Register:
    """Create a password account and issue a session immediately.

    The account starts unverified; password login is blocked until the
    emailed verification token is consumed.
    """

    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class RefreshSession:
    """Exchange a refresh token for a new access/refresh token pair."""

    refresh_token: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class RevokeToken:
    """Revoke a single refresh token."""

    refresh_token: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class Logout:
    """Revoke the session's refresh token and record a logout."""

    refresh_token: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class RevokeAllTokens:
    """Revoke every refresh token of a user."""

    user_id: UUID
    ip_address: str


# ═══════════════════════════════════════════════════════════════
# Email Verification
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class VerifyEmail:
    token: str


@dataclass(frozen=True, kw_only=True)
class ResendEmailVerification:
    email: str


# ═══════════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class ForgotPassword:
    """Request a password reset email.

    Always succeeds, whether or not the email belongs to an account.
    """

    email: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Set a new password using an emailed reset token.

    Revokes every refresh token of the account.
    """

    token: str
    new_password: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change the password of an authenticated user. Sessions are kept."""

    user_id: UUID
    current_password: str
    new_password: str


# ═══════════════════════════════════════════════════════════════
# OAuth and Profile
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class OAuthLogin:
    """Complete an OAuth authorization-code flow.

    Attributes:
        provider: Provider name as received ("google", "github").
        code: Authorization code from the provider redirect.
        state: Anti-CSRF state issued with the authorization URL.
        ip_address: Client IP.
    """

    provider: str
    code: str
    state: str
    ip_address: str


@dataclass(frozen=True, kw_only=True)
class UpdateProfile:
    """Update names, avatar and profile fields.

    Fields left as None are not changed. ``preferences`` uses the stored
    profile shape (theme, language, notifications).
    """

    user_id: UUID
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    company: str | None = None
    skills: list[str] | None = None
    preferences: dict[str, Any] | None = None
