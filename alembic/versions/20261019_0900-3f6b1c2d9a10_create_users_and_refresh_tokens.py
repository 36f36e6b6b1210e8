"""create_users_and_refresh_tokens

Revision ID: 3f6b1c2d9a10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f6b1c2d9a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and refresh_tokens tables."""
    op.create_table(
        "users",
        # Primary key and timestamps from BaseMutableModel
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        # Identity
        sa.Column(
            "username", sa.String(length=50), nullable=False, comment="Unique public handle"
        ),
        sa.Column(
            "email", sa.String(length=255), nullable=False, comment="Unique email address"
        ),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=True,
            comment="bcrypt hash, NULL for OAuth-only accounts",
        ),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, comment="user | admin"),
        # Verification and reset
        sa.Column(
            "is_email_verified",
            sa.Boolean(),
            nullable=False,
            comment="Password login requires True",
        ),
        sa.Column(
            "email_verification_token",
            sa.String(length=128),
            nullable=True,
            comment="Single-use verification token",
        ),
        sa.Column(
            "reset_password_token",
            sa.String(length=128),
            nullable=True,
            comment="Single-use password reset token",
        ),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        # OAuth linkage
        sa.Column("google_id", sa.String(length=64), nullable=True),
        sa.Column("github_id", sa.String(length=64), nullable=True),
        # Subscription and stats
        sa.Column("subscription_plan", sa.String(length=20), nullable=False),
        sa.Column("subscription_status", sa.String(length=20), nullable=False),
        sa.Column("subscription_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_solved", sa.Integer(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column(
            "profile",
            sa.JSON(),
            nullable=False,
            comment="Profile sub-document (bio, skills, preferences)",
        ),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(
        op.f("ix_users_email_verification_token"),
        "users",
        ["email_verification_token"],
        unique=False,
    )
    op.create_index(
        op.f("ix_users_reset_password_token"),
        "users",
        ["reset_password_token"],
        unique=False,
    )
    op.create_index(op.f("ix_users_google_id"), "users", ["google_id"], unique=True)
    op.create_index(op.f("ix_users_github_id"), "users", ["github_id"], unique=True)

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "token",
            sa.String(length=128),
            nullable=False,
            comment="Opaque token value (base64 of 64 random bytes)",
        ),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_ip", sa.String(length=45), nullable=False),
        sa.Column("revoked", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by_ip", sa.String(length=45), nullable=True),
        sa.Column("replaced_by_token", sa.String(length=128), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Reverse lookup: token value -> owner
    op.create_index(
        op.f("ix_refresh_tokens_token"), "refresh_tokens", ["token"], unique=True
    )
    op.create_index(
        op.f("ix_refresh_tokens_user_id"), "refresh_tokens", ["user_id"], unique=False
    )


def downgrade() -> None:
    """Drop refresh_tokens and users tables."""
    op.drop_index(op.f("ix_refresh_tokens_user_id"), table_name="refresh_tokens")
    op.drop_index(op.f("ix_refresh_tokens_token"), table_name="refresh_tokens")
    op.drop_table("refresh_tokens")
    op.drop_index(op.f("ix_users_github_id"), table_name="users")
    op.drop_index(op.f("ix_users_google_id"), table_name="users")
    op.drop_index(op.f("ix_users_reset_password_token"), table_name="users")
    op.drop_index(op.f("ix_users_email_verification_token"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
