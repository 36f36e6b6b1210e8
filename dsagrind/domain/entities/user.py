"""User domain entity for authentication and session lifecycle.

Pure business logic, no framework dependencies.

Session Management:
    - refresh_tokens: every token ever kept for the user, active or revoked
    - add_refresh_token(): appends and prunes to the most recent active tokens
    - revoke_all_refresh_tokens(): forces re-login everywhere

Account Recovery:
    - email_verification_token: single-use, cleared on verification
    - reset_password_token/expires: single-use, time-boxed, cleared on reset

OAuth Linkage:
    - google_id / github_id: external ids, set on first OAuth login or link
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from dsagrind.domain.entities.refresh_token import RefreshToken
from dsagrind.domain.enums import OAuthProvider, UserRole

DEFAULT_SUBSCRIPTION_PLAN = "free"
DEFAULT_SUBSCRIPTION_STATUS = "active"


@dataclass
class NotificationSettings:
    """Per-channel notification opt-ins."""

    email: bool = True
    push: bool = True
    contests: bool = True
    submissions: bool = True


@dataclass
class UserPreferences:
    """Display preferences.

    Attributes:
        theme: "light", "dark" or "system".
        language: UI language code.
        notifications: Notification opt-ins.
    """

    theme: str = "system"
    language: str = "en"
    notifications: NotificationSettings = field(default_factory=NotificationSettings)


@dataclass
class UserProfile:
    """Public profile sub-document."""

    bio: str | None = None
    location: str | None = None
    website: str | None = None
    company: str | None = None
    skills: list[str] = field(default_factory=list)
    preferences: UserPreferences = field(default_factory=UserPreferences)

    def to_dict(self) -> dict:
        """Serialize to plain JSON-compatible data."""
        return {
            "bio": self.bio,
            "location": self.location,
            "website": self.website,
            "company": self.company,
            "skills": list(self.skills),
            "preferences": {
                "theme": self.preferences.theme,
                "language": self.preferences.language,
                "notifications": {
                    "email": self.preferences.notifications.email,
                    "push": self.preferences.notifications.push,
                    "contests": self.preferences.notifications.contests,
                    "submissions": self.preferences.notifications.submissions,
                },
            },
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "UserProfile":
        """Build from stored JSON, tolerating missing keys."""
        if not data:
            return cls()
        prefs = data.get("preferences") or {}
        notifications = prefs.get("notifications") or {}
        return cls(
            bio=data.get("bio"),
            location=data.get("location"),
            website=data.get("website"),
            company=data.get("company"),
            skills=list(data.get("skills") or []),
            preferences=UserPreferences(
                theme=prefs.get("theme", "system"),
                language=prefs.get("language", "en"),
                notifications=NotificationSettings(
                    email=notifications.get("email", True),
                    push=notifications.get("push", True),
                    contests=notifications.get("contests", True),
                    submissions=notifications.get("submissions", True),
                ),
            ),
        )


@dataclass
class User:
    """User domain entity with session-lifecycle business rules.

    Business Rules:
        - Username and email are globally unique (enforced by the store)
        - Email verification required before password login
        - At most ``max_active`` active refresh tokens are retained, newest first
        - Verification and reset tokens are cleared once consumed
        - OAuth-only accounts have no password hash

    Attributes:
        id: Unique user identifier (UUIDv7)
        username: Unique handle
        email: Unique email address
        password_hash: bcrypt hash, None for OAuth-only accounts
        role: Account role
        is_email_verified: Blocks password login while False
        refresh_tokens: Issued refresh tokens (active and revoked)
        pruned_refresh_tokens: Token values removed by pruning since load

    Example:
        >>> user = User(id=uuid7(), username="bob", email="bob@x.com")
        >>> user.add_refresh_token(token, max_active=5)
        >>> len(user.active_refresh_tokens)
        1
    """

    id: UUID
    username: str
    email: str
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    role: UserRole = UserRole.USER

    is_email_verified: bool = False
    email_verification_token: str | None = None
    reset_password_token: str | None = None
    reset_password_expires: datetime | None = None

    google_id: str | None = None
    github_id: str | None = None

    subscription_plan: str = DEFAULT_SUBSCRIPTION_PLAN
    subscription_status: str = DEFAULT_SUBSCRIPTION_STATUS
    subscription_expires: datetime | None = None

    refresh_tokens: list[RefreshToken] = field(default_factory=list)
    # Values dropped by add_refresh_token; the store deletes only these
    pruned_refresh_tokens: set[str] = field(
        default_factory=set, repr=False, compare=False
    )

    total_solved: int = 0
    rank: int = 0
    profile: UserProfile = field(default_factory=UserProfile)

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_login_at: datetime | None = None

    @property
    def has_password(self) -> bool:
        """False for OAuth-only accounts."""
        return bool(self.password_hash)

    @property
    def active_refresh_tokens(self) -> list[RefreshToken]:
        return [token for token in self.refresh_tokens if token.is_active]

    def find_refresh_token(self, value: str) -> RefreshToken | None:
        """Find a refresh token by its value (active or not)."""
        for token in self.refresh_tokens:
            if token.token == value:
                return token
        return None

    def add_refresh_token(self, token: RefreshToken, max_active: int) -> None:
        """Append a freshly issued token and prune the list.

        Pruning keeps only active tokens, newest first, capped at
        ``max_active``. Revoked and expired entries are dropped.
        Dropped values are remembered in ``pruned_refresh_tokens``.

        Args:
            token: Newly issued refresh token.
            max_active: Maximum number of active tokens to keep.
        """
        self.refresh_tokens.append(token)
        active = sorted(
            self.active_refresh_tokens, key=lambda t: t.created, reverse=True
        )
        kept = active[:max_active]
        kept_values = {t.token for t in kept}
        self.pruned_refresh_tokens.update(
            t.token for t in self.refresh_tokens if t.token not in kept_values
        )
        self.refresh_tokens = kept
        self._touch()

    def revoke_all_refresh_tokens(self, ip_address: str) -> int:
        """Revoke every active refresh token.

        Returns:
            Number of tokens revoked.
        """
        revoked = 0
        for token in self.refresh_tokens:
            if token.is_active:
                token.revoke(ip_address)
                revoked += 1
        if revoked:
            self._touch()
        return revoked

    def verify_email(self) -> None:
        """Mark the email verified and consume the verification token."""
        self.is_email_verified = True
        self.email_verification_token = None
        self._touch()

    def request_password_reset(self, token: str, expires: datetime) -> None:
        self.reset_password_token = token
        self.reset_password_expires = expires
        self._touch()

    def has_valid_reset_token(self, token: str) -> bool:
        """True when ``token`` matches and has not expired."""
        if self.reset_password_token is None or self.reset_password_expires is None:
            return False
        return (
            self.reset_password_token == token
            and datetime.now(UTC) < self.reset_password_expires
        )

    def set_password(self, password_hash: str) -> None:
        """Store a new password hash and consume any pending reset token."""
        self.password_hash = password_hash
        self.reset_password_token = None
        self.reset_password_expires = None
        self._touch()

    def oauth_id(self, provider: OAuthProvider) -> str | None:
        """External id linked for ``provider``, if any."""
        match provider:
            case OAuthProvider.GOOGLE:
                return self.google_id
            case OAuthProvider.GITHUB:
                return self.github_id

    def link_oauth(self, provider: OAuthProvider, external_id: str) -> None:
        """Link an external identity and trust the provider-attested email.

        Args:
            provider: Identity provider.
            external_id: Provider's user id.
        """
        match provider:
            case OAuthProvider.GOOGLE:
                self.google_id = external_id
            case OAuthProvider.GITHUB:
                self.github_id = external_id
        self.is_email_verified = True
        self._touch()

    def record_login(self) -> None:
        self.last_login_at = datetime.now(UTC)
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
