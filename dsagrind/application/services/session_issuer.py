"""Session issuance shared by Login, Register, RefreshToken and OAuthLogin.

Issuing a session means: sign an access token, mint an opaque refresh token
stamped with the client IP, keep it on the user (pruned to the most recent
active tokens), persist, cache the user projection and build the response.

The response reports ``expires_at`` as 15 minutes from issuance regardless of
the signed token's own ``exp``; clients refresh on the reported value.
"""

from datetime import UTC, datetime, timedelta

from dsagrind.application.dtos import AuthResponse, UserProjection
from dsagrind.application.services.user_cache import UserCache
from dsagrind.core.constants import REPORTED_ACCESS_TOKEN_MINUTES
from dsagrind.domain.entities import RefreshToken, User
from dsagrind.domain.protocols import (
    SecureTokenProtocol,
    TokenGenerationProtocol,
    UserRepository,
)


class SessionIssuer:
    """Issues access/refresh token pairs for a user.

    Attributes:
        refresh_token_days: Lifetime of new refresh tokens.
        max_active_refresh_tokens: Active tokens kept per user after pruning.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenGenerationProtocol,
        secure_token_service: SecureTokenProtocol,
        user_cache: UserCache,
        refresh_token_days: int = 7,
        max_active_refresh_tokens: int = 5,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._secure_token_service = secure_token_service
        self._user_cache = user_cache
        self.refresh_token_days = refresh_token_days
        self.max_active_refresh_tokens = max_active_refresh_tokens

    def new_refresh_token(self, ip_address: str) -> RefreshToken:
        """Mint a refresh token without attaching it to a user."""
        now = datetime.now(UTC)
        return RefreshToken(
            token=self._secure_token_service.generate_refresh_token(),
            expires=now + timedelta(days=self.refresh_token_days),
            created=now,
            created_by_ip=ip_address,
        )

    def attach_refresh_token(self, user: User, ip_address: str) -> RefreshToken:
        """Mint a refresh token and add it to ``user`` (pruning), unpersisted."""
        token = self.new_refresh_token(ip_address)
        user.add_refresh_token(token, self.max_active_refresh_tokens)
        return token

    async def issue(self, user: User, ip_address: str) -> AuthResponse:
        """Attach a new refresh token to an existing user, persist, respond."""
        token = self.attach_refresh_token(user, ip_address)
        await self._user_repo.update(user)
        return await self.respond(user, token)

    async def respond(self, user: User, refresh_token: RefreshToken) -> AuthResponse:
        """Sign the access token, cache the projection and build the response.

        ``refresh_token`` must already be persisted.
        """
        access_token = self._token_service.generate_access_token(user)
        projection = UserProjection.from_user(user)
        await self._user_cache.set(projection)
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token.token,
            user=projection,
            expires_at=datetime.now(UTC)
            + timedelta(minutes=REPORTED_ACCESS_TOKEN_MINUTES),
        )
