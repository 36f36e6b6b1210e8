"""Refresh session handler (refresh token rotation).

Flow:
1. Find the owner through the token index
2. Reject unknown or inactive tokens (TOKEN_INVALID)
3. Conditionally revoke the presented token and store its successor
4. Reject if another request rotated it first (TOKEN_STALE)
5. Publish RefreshTokenRevoked (rotated=True)
6. Return Success(AuthResponse) with the new pair

Rotation does not prune: the revoked predecessor stays on the user so the
replaced-by chain is kept, and the active count is unchanged.
"""

from dsagrind.application.commands.auth_commands import RefreshSession
from dsagrind.application.dtos import AuthResponse
from dsagrind.application.services import SessionIssuer
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.errors import AuthError
from dsagrind.domain.events import RefreshTokenRevoked
from dsagrind.domain.protocols import EventBusProtocol, LoggerProtocol, UserRepository


class RefreshSessionError:
    """Refresh error messages."""

    INVALID_TOKEN = "Invalid refresh token"
    STALE_TOKEN = "Refresh token was already used"


class RefreshSessionHandler:
    """Handler for the RefreshSession command."""

    def __init__(
        self,
        user_repo: UserRepository,
        session_issuer: SessionIssuer,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._session_issuer = session_issuer
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: RefreshSession) -> Result[AuthResponse, DomainError]:
        """Handle the RefreshSession command.

        Returns:
            Success(AuthResponse) with the rotated pair.
            Failure(AuthError) with TOKEN_INVALID or TOKEN_STALE.
        """
        # Step 1-2: Owner and activity
        user = await self._user_repo.find_by_refresh_token(cmd.refresh_token)
        current = user.find_refresh_token(cmd.refresh_token) if user else None
        if user is None or current is None or not current.is_active:
            self._logger.info("refresh_token_rejected", ip_address=cmd.ip_address)
            return Failure(
                error=AuthError(
                    code=ErrorCode.TOKEN_INVALID,
                    message=RefreshSessionError.INVALID_TOKEN,
                )
            )

        # Step 3: Conditional rotation
        successor = self._session_issuer.new_refresh_token(cmd.ip_address)
        rotated = await self._user_repo.rotate_refresh_token(
            cmd.refresh_token, successor, cmd.ip_address
        )

        # Step 4: Lost a concurrent rotation
        if not rotated:
            self._logger.warning(
                "refresh_token_stale",
                user_id=str(user.id),
                ip_address=cmd.ip_address,
            )
            return Failure(
                error=AuthError(
                    code=ErrorCode.TOKEN_STALE,
                    message=RefreshSessionError.STALE_TOKEN,
                )
            )
        current.revoke(cmd.ip_address, replaced_by_token=successor.token)
        user.refresh_tokens.append(successor)

        # Step 5: Publish event
        await self._event_bus.publish(
            RefreshTokenRevoked(
                user_id=user.id, ip_address=cmd.ip_address, rotated=True
            )
        )
        self._logger.info("refresh_token_rotated", user_id=str(user.id))

        # Step 6: New pair
        return Success(value=await self._session_issuer.respond(user, successor))
