"""Refresh token database model.

One row per issued token. The unique index on ``token`` is the reverse
lookup from an opaque token value to its owner. Rows are revoked, not
deleted, when rotated or logged out; pruning on login deletes them.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dsagrind.infrastructure.persistence.base import BaseModel

if TYPE_CHECKING:
    from dsagrind.infrastructure.persistence.models.user import User


class RefreshToken(BaseModel):
    """Refresh token row (created_at is the issuance time)."""

    __tablename__ = "refresh_tokens"

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque token value (base64 of 64 random bytes)",
    )
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by_ip: Mapped[str] = mapped_column(String(45), nullable=False)
    revoked: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    revoked_by_ip: Mapped[str | None] = mapped_column(String(45), nullable=True)
    replaced_by_token: Mapped[str | None] = mapped_column(String(128), nullable=True)

    user: Mapped["User"] = relationship(back_populates="refresh_tokens")
