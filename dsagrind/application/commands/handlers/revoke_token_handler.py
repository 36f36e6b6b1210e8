"""Revoke token handler.

Revokes one refresh token if it is still active. Unknown and already
inactive tokens are a soft NotFoundError (no side effects).
"""

from dsagrind.application.commands.auth_commands import RevokeToken
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.events import RefreshTokenRevoked
from dsagrind.domain.protocols import EventBusProtocol, LoggerProtocol, UserRepository


def token_not_found() -> NotFoundError:
    """Soft failure for unknown or inactive refresh tokens."""
    return NotFoundError(
        code=ErrorCode.TOKEN_NOT_FOUND,
        message="Refresh token not found or already revoked",
        resource_type="RefreshToken",
        resource_id="",
    )


class RevokeTokenHandler:
    """Handler for the RevokeToken command."""

    def __init__(
        self,
        user_repo: UserRepository,
        user_cache: UserCache,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._user_cache = user_cache
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: RevokeToken) -> Result[bool, NotFoundError]:
        """Handle the RevokeToken command.

        Returns:
            Success(True) when an active token was revoked.
            Failure(NotFoundError) when nothing was revoked.
        """
        user = await self._user_repo.find_by_refresh_token(cmd.refresh_token)
        if user is None:
            return Failure(error=token_not_found())

        revoked = await self._user_repo.revoke_refresh_token(
            cmd.refresh_token, cmd.ip_address
        )
        if not revoked:
            return Failure(error=token_not_found())

        await self._event_bus.publish(
            RefreshTokenRevoked(user_id=user.id, ip_address=cmd.ip_address)
        )
        await self._user_cache.invalidate(user.id)
        self._logger.info("refresh_token_revoked", user_id=str(user.id))
        return Success(value=True)
