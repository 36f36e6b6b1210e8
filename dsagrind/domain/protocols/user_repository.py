"""UserRepository protocol (port) for the user record store.

Lookups return None when nothing matches. ``find_by_refresh_token`` is an
indexed reverse lookup (token value -> owning user), not a scan.

Conditional writes (``rotate_refresh_token``, ``revoke_refresh_token``) only
change a token that is still active at write time and report whether they
did, so concurrent callers presenting the same token cannot both win.
"""

from typing import Protocol
from uuid import UUID

from dsagrind.core.errors import ConflictError
from dsagrind.core.result import Result
from dsagrind.domain.entities import RefreshToken, User
from dsagrind.domain.enums import OAuthProvider


class UserRepository(Protocol):
    """User persistence interface."""

    async def find_by_id(self, user_id: UUID) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_username(self, username: str) -> User | None: ...

    async def find_by_refresh_token(self, token: str) -> User | None:
        """Owner of ``token`` whether or not the token is still active."""
        ...

    async def find_by_verification_token(self, token: str) -> User | None: ...

    async def find_by_reset_token(self, token: str) -> User | None:
        """Owner of an unexpired reset token."""
        ...

    async def find_by_oauth_id(
        self, provider: OAuthProvider, external_id: str
    ) -> User | None: ...

    async def exists_by_email(self, email: str) -> bool: ...

    async def exists_by_username(self, username: str) -> bool: ...

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert a new user with its refresh tokens.

        Uniqueness of email and username is enforced by the store. Losing a
        registration race yields Failure(ConflictError) with code EMAIL_TAKEN
        or USERNAME_TAKEN.
        """
        ...

    async def update(self, user: User) -> None:
        """Persist scalar fields and synchronize the refresh token list."""
        ...

    async def update_profile(self, user_id: UUID, user: User) -> bool:
        """Persist names, avatar and profile sub-document only."""
        ...

    async def rotate_refresh_token(
        self, old_token: str, new_token: RefreshToken, ip_address: str
    ) -> bool:
        """Revoke ``old_token`` in favour of ``new_token`` atomically.

        Returns:
            False when ``old_token`` was no longer active (nothing written).
        """
        ...

    async def revoke_refresh_token(self, token: str, ip_address: str) -> bool:
        """Revoke a single still-active token. False when nothing changed."""
        ...

    async def revoke_all_refresh_tokens(self, user_id: UUID, ip_address: str) -> int:
        """Revoke every active token of a user. Returns the number revoked."""
        ...
