"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain User entities (with embedded refresh tokens) and the
``users`` / ``refresh_tokens`` tables.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import ConflictError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.entities import RefreshToken, User, UserProfile
from dsagrind.domain.enums import OAuthProvider, UserRole
from dsagrind.infrastructure.persistence.base import as_utc
from dsagrind.infrastructure.persistence.models.refresh_token import (
    RefreshToken as RefreshTokenModel,
)
from dsagrind.infrastructure.persistence.models.user import User as UserModel


class UserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing).

    Every write commits. Lookups use ``populate_existing`` so rows changed by
    the conditional bulk updates are never served stale from the identity map.

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = UserRepository(session)
        ...     user = await repo.find_by_email("user@example.com")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        return await self._find_one(UserModel.id == user_id)

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        return await self._find_one(func.lower(UserModel.email) == email.lower())

    async def find_by_username(self, username: str) -> User | None:
        return await self._find_one(UserModel.username == username)

    async def find_by_refresh_token(self, token: str) -> User | None:
        """Find the owner of a refresh token through the unique token index.

        Args:
            token: Opaque refresh token value.

        Returns:
            Owning user whether or not the token is still active.
        """
        stmt = select(RefreshTokenModel.user_id).where(
            RefreshTokenModel.token == token
        )
        result = await self.session.execute(stmt)
        user_id = result.scalar_one_or_none()
        if user_id is None:
            return None
        return await self.find_by_id(user_id)

    async def find_by_verification_token(self, token: str) -> User | None:
        return await self._find_one(UserModel.email_verification_token == token)

    async def find_by_reset_token(self, token: str) -> User | None:
        """Find the owner of an unexpired password reset token."""
        return await self._find_one(
            UserModel.reset_password_token == token,
            UserModel.reset_password_expires > datetime.now(UTC),
        )

    async def find_by_oauth_id(
        self, provider: OAuthProvider, external_id: str
    ) -> User | None:
        column = {
            OAuthProvider.GOOGLE: UserModel.google_id,
            OAuthProvider.GITHUB: UserModel.github_id,
        }[provider]
        return await self._find_one(column == external_id)

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(UserModel.id).where(func.lower(UserModel.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Create new user in database.

        Args:
            user: Domain User entity to persist.

        Returns:
            Success(None), or Failure(ConflictError) when email or username
            was taken concurrently.
        """
        user_model = self._to_model(user)
        self.session.add(user_model)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if await self.exists_by_email(user.email):
                return Failure(
                    error=ConflictError(
                        code=ErrorCode.EMAIL_TAKEN,
                        message="Email already registered",
                        resource_type="User",
                        conflicting_field="email",
                    )
                )
            return Failure(
                error=ConflictError(
                    code=ErrorCode.USERNAME_TAKEN,
                    message="Username already taken",
                    resource_type="User",
                    conflicting_field="username",
                )
            )
        return Success(value=None)

    async def update(self, user: User) -> None:
        """Update an existing user and synchronize its refresh tokens.

        Tokens are matched by value. New values are inserted and values in
        ``user.pruned_refresh_tokens`` are deleted. Revocation only moves
        forward: a row revoked by a concurrent request stays revoked, and rows
        the entity never saw (minted after it was loaded) are left alone.

        Args:
            user: Domain User entity with updated fields.

        Raises:
            NoResultFound: If user doesn't exist.
        """
        stmt = (
            select(UserModel)
            .where(UserModel.id == user.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        user_model = result.scalar_one()

        for key, value in self._scalar_fields(user).items():
            setattr(user_model, key, value)

        existing = {row.token: row for row in user_model.refresh_tokens}
        for token in user.refresh_tokens:
            row = existing.get(token.token)
            if row is None:
                user_model.refresh_tokens.append(self._token_to_model(token, user.id))
            elif row.revoked is None and token.revoked is not None:
                row.revoked = token.revoked
                row.revoked_by_ip = token.revoked_by_ip
                row.replaced_by_token = token.replaced_by_token

        for value in user.pruned_refresh_tokens:
            row = existing.get(value)
            if row is not None:
                user_model.refresh_tokens.remove(row)

        await self.session.commit()

    async def update_profile(self, user_id: UUID, user: User) -> bool:
        """Persist names, avatar and profile only.

        Returns:
            False if the user does not exist.
        """
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                first_name=user.first_name,
                last_name=user.last_name,
                avatar=user.avatar,
                profile=user.profile.to_dict(),
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def rotate_refresh_token(
        self, old_token: str, new_token: RefreshToken, ip_address: str
    ) -> bool:
        """Revoke ``old_token`` and insert ``new_token`` in one transaction.

        The revocation is a conditional UPDATE on the still-active row, so of
        two concurrent rotations of the same token exactly one matches.

        Returns:
            False when ``old_token`` was no longer active.
        """
        now = datetime.now(UTC)
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.token == old_token,
                RefreshTokenModel.revoked.is_(None),
                RefreshTokenModel.expires > now,
            )
            .values(
                revoked=now,
                revoked_by_ip=ip_address,
                replaced_by_token=new_token.token,
            )
            .returning(RefreshTokenModel.user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        user_id = result.scalar_one_or_none()
        if user_id is None:
            await self.session.rollback()
            return False

        self.session.add(self._token_to_model(new_token, user_id))
        await self.session.commit()
        return True

    async def revoke_refresh_token(self, token: str, ip_address: str) -> bool:
        now = datetime.now(UTC)
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.token == token,
                RefreshTokenModel.revoked.is_(None),
                RefreshTokenModel.expires > now,
            )
            .values(revoked=now, revoked_by_ip=ip_address)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def revoke_all_refresh_tokens(self, user_id: UUID, ip_address: str) -> int:
        now = datetime.now(UTC)
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.user_id == user_id,
                RefreshTokenModel.revoked.is_(None),
                RefreshTokenModel.expires > now,
            )
            .values(revoked=now, revoked_by_ip=ip_address)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def _find_one(self, *criteria: Any) -> User | None:
        stmt = (
            select(UserModel)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        user_model = result.scalar_one_or_none()

        if user_model is None:
            return None

        return self._to_domain(user_model)

    @staticmethod
    def _scalar_fields(user: User) -> dict[str, Any]:
        return {
            "username": user.username,
            "email": user.email,
            "password_hash": user.password_hash,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "avatar": user.avatar,
            "role": user.role.value,
            "is_email_verified": user.is_email_verified,
            "email_verification_token": user.email_verification_token,
            "reset_password_token": user.reset_password_token,
            "reset_password_expires": user.reset_password_expires,
            "google_id": user.google_id,
            "github_id": user.github_id,
            "subscription_plan": user.subscription_plan,
            "subscription_status": user.subscription_status,
            "subscription_expires": user.subscription_expires,
            "total_solved": user.total_solved,
            "rank": user.rank,
            "profile": user.profile.to_dict(),
            "last_login_at": user.last_login_at,
            "updated_at": user.updated_at,
        }

    @staticmethod
    def _token_to_model(token: RefreshToken, user_id: UUID) -> RefreshTokenModel:
        return RefreshTokenModel(
            user_id=user_id,
            token=token.token,
            expires=token.expires,
            created_at=token.created,
            created_by_ip=token.created_by_ip,
            revoked=token.revoked,
            revoked_by_ip=token.revoked_by_ip,
            replaced_by_token=token.replaced_by_token,
        )

    def _to_domain(self, user_model: UserModel) -> User:
        """Convert database model to domain entity.

        Args:
            user_model: SQLAlchemy UserModel instance (tokens eagerly loaded).

        Returns:
            Domain User entity.
        """
        return User(
            id=user_model.id,
            username=user_model.username,
            email=user_model.email,
            password_hash=user_model.password_hash,
            first_name=user_model.first_name,
            last_name=user_model.last_name,
            avatar=user_model.avatar,
            role=UserRole(user_model.role),
            is_email_verified=user_model.is_email_verified,
            email_verification_token=user_model.email_verification_token,
            reset_password_token=user_model.reset_password_token,
            reset_password_expires=as_utc(user_model.reset_password_expires),
            google_id=user_model.google_id,
            github_id=user_model.github_id,
            subscription_plan=user_model.subscription_plan,
            subscription_status=user_model.subscription_status,
            subscription_expires=as_utc(user_model.subscription_expires),
            refresh_tokens=[
                RefreshToken(
                    token=row.token,
                    expires=as_utc(row.expires),
                    created=as_utc(row.created_at),
                    created_by_ip=row.created_by_ip,
                    revoked=as_utc(row.revoked),
                    revoked_by_ip=row.revoked_by_ip,
                    replaced_by_token=row.replaced_by_token,
                )
                for row in user_model.refresh_tokens
            ],
            total_solved=user_model.total_solved,
            rank=user_model.rank,
            profile=UserProfile.from_dict(user_model.profile),
            created_at=as_utc(user_model.created_at),
            updated_at=as_utc(user_model.updated_at),
            last_login_at=as_utc(user_model.last_login_at),
        )

    def _to_model(self, user: User) -> UserModel:
        """Convert domain entity to database model."""
        return UserModel(
            id=user.id,
            created_at=user.created_at,
            refresh_tokens=[
                self._token_to_model(token, user.id) for token in user.refresh_tokens
            ],
            **self._scalar_fields(user),
        )
