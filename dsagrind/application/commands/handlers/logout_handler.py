"""Logout handler.

Same revocation as RevokeToken, recorded as a UserLogout event.
"""

from dsagrind.application.commands.auth_commands import Logout
from dsagrind.application.commands.handlers.revoke_token_handler import (
    token_not_found,
)
from dsagrind.application.services import UserCache
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.events import UserLogout
from dsagrind.domain.protocols import EventBusProtocol, LoggerProtocol, UserRepository


class LogoutHandler:
    """Handler for the Logout command."""

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

    async def handle(self, cmd: Logout) -> Result[bool, NotFoundError]:
        user = await self._user_repo.find_by_refresh_token(cmd.refresh_token)
        if user is None or not await self._user_repo.revoke_refresh_token(
            cmd.refresh_token, cmd.ip_address
        ):
            return Failure(error=token_not_found())

        await self._event_bus.publish(
            UserLogout(user_id=user.id, ip_address=cmd.ip_address)
        )
        await self._user_cache.invalidate(user.id)
        self._logger.info("user_logged_out", user_id=str(user.id))
        return Success(value=True)
