"""Authentication DTOs (Data Transfer Objects).

Response dataclasses carrying data from handlers back to the presentation
layer.

DTOs:
    - UserProjection: Public view of a user (also the cached shape)
    - AuthResponse: Result of Login, Register, RefreshToken and OAuthLogin
    - OAuthUrl: Result of GenerateOAuthUrl
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from dsagrind.domain.entities import User, UserProfile
from dsagrind.domain.enums import UserRole


@dataclass(frozen=True, kw_only=True)
class UserProjection:
    """Client-facing user view.

    Never contains the password hash, refresh tokens or pending
    verification/reset tokens.

    Attributes:
        id: User id.
        username: Unique handle.
        email: Account email.
        role: Account role.
        is_email_verified: Whether the email has been verified.
        profile: Profile sub-document as plain data.
    """

    id: UUID
    username: str
    email: str
    first_name: str | None
    last_name: str | None
    avatar: str | None
    role: UserRole
    is_email_verified: bool
    subscription_plan: str
    subscription_status: str
    total_solved: int
    rank: int
    created_at: datetime
    last_login_at: datetime | None
    profile: dict[str, Any] = field(default_factory=dict)
    has_password: bool = True
    linked_providers: list[str] = field(default_factory=list)

    @classmethod
    def from_user(cls, user: User) -> "UserProjection":
        linked = [
            name
            for name, external_id in (
                ("google", user.google_id),
                ("github", user.github_id),
            )
            if external_id
        ]
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user.avatar,
            role=user.role,
            is_email_verified=user.is_email_verified,
            subscription_plan=user.subscription_plan,
            subscription_status=user.subscription_status,
            total_solved=user.total_solved,
            rank=user.rank,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
            profile=user.profile.to_dict(),
            has_password=user.has_password,
            linked_providers=linked,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form, used for the cache entry."""
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "avatar": self.avatar,
            "role": self.role.value,
            "is_email_verified": self.is_email_verified,
            "subscription_plan": self.subscription_plan,
            "subscription_status": self.subscription_status,
            "total_solved": self.total_solved,
            "rank": self.rank,
            "created_at": self.created_at.isoformat(),
            "last_login_at": (
                self.last_login_at.isoformat() if self.last_login_at else None
            ),
            "profile": self.profile,
            "has_password": self.has_password,
            "linked_providers": list(self.linked_providers),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProjection":
        """Rebuild from ``to_dict`` output.

        Raises:
            KeyError, ValueError: If the cached entry is malformed.
        """
        last_login = data.get("last_login_at")
        return cls(
            id=UUID(data["id"]),
            username=data["username"],
            email=data["email"],
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            avatar=data.get("avatar"),
            role=UserRole(data["role"]),
            is_email_verified=data["is_email_verified"],
            subscription_plan=data["subscription_plan"],
            subscription_status=data["subscription_status"],
            total_solved=data.get("total_solved", 0),
            rank=data.get("rank", 0),
            created_at=datetime.fromisoformat(data["created_at"]),
            last_login_at=datetime.fromisoformat(last_login) if last_login else None,
            profile=UserProfile.from_dict(data.get("profile")).to_dict(),
            has_password=data.get("has_password", True),
            linked_providers=list(data.get("linked_providers") or []),
        )


@dataclass(frozen=True, kw_only=True)
class AuthResponse:
    """Issued session.

    Attributes:
        access_token: Signed JWT.
        refresh_token: Opaque refresh token (also set as a cookie by the API).
        user: Projection of the authenticated user.
        expires_at: Reported access-token expiry (15 minutes from issuance).
    """

    access_token: str
    refresh_token: str
    user: UserProjection
    expires_at: datetime
    token_type: str = "bearer"


@dataclass(frozen=True, kw_only=True)
class OAuthUrl:
    """Authorization URL and the state value bound to it."""

    url: str
    state: str
