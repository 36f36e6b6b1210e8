"""Revoke all tokens handler.

Forces re-login on every device. Succeeds for an existing user even when
there was nothing left to revoke.
"""

from dsagrind.application.commands.auth_commands import RevokeAllTokens
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.protocols import LoggerProtocol, UserRepository


class RevokeAllTokensHandler:
    """Handler for the RevokeAllTokens command."""

    def __init__(
        self,
        user_repo: UserRepository,
        user_cache: UserCache,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._user_cache = user_cache
        self._logger = logger

    async def handle(self, cmd: RevokeAllTokens) -> Result[bool, NotFoundError]:
        """Handle the RevokeAllTokens command.

        Returns:
            Success(True) for an existing user.
            Failure(NotFoundError) when the user does not exist.
        """
        user = await self._user_repo.find_by_id(cmd.user_id)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                    resource_type="User",
                    resource_id=str(cmd.user_id),
                )
            )

        count = await self._user_repo.revoke_all_refresh_tokens(
            cmd.user_id, cmd.ip_address
        )
        await self._user_cache.invalidate(cmd.user_id)
        self._logger.info(
            "refresh_tokens_revoked_all", user_id=str(cmd.user_id), count=count
        )
        return Success(value=True)
