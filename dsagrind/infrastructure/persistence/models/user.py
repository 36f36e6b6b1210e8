"""User database model.

Security:
    - password_hash: bcrypt hash, NULL for OAuth-only accounts
    - email_verification_token / reset_password_token: single-use secrets,
      indexed for lookup, cleared once consumed

OAuth Linkage:
    - google_id / github_id: unique when set
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dsagrind.infrastructure.persistence.base import BaseMutableModel

if TYPE_CHECKING:
    from dsagrind.infrastructure.persistence.models.refresh_token import RefreshToken


class User(BaseMutableModel):
    """User account row.

    Indexes:
        - email, username: unique
        - email_verification_token, reset_password_token: lookup
        - google_id, github_id: unique

    Relationships:
        - refresh_tokens: One-to-many, loaded eagerly (selectin), cascade delete
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique public handle",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique email address",
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt hash, NULL for OAuth-only accounts",
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="user",
        comment="user | admin",
    )

    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Password login requires True",
    )
    email_verification_token: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
        index=True,
        comment="Single-use verification token",
    )
    reset_password_token: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
        index=True,
        comment="Single-use password reset token",
    )
    reset_password_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    google_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True, index=True
    )
    github_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True, index=True
    )

    subscription_plan: Mapped[str] = mapped_column(
        String(20), nullable=False, default="free"
    )
    subscription_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )
    subscription_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    total_solved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    profile: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Profile sub-document (bio, skills, preferences)",
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    refresh_tokens: Mapped[list["RefreshToken"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="RefreshToken.created_at",
    )
