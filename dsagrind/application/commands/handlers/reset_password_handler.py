"""Reset password handler.

Flow:
1. Find user by unexpired reset token
2. Store the new hash and consume the token
3. Revoke every refresh token (re-login everywhere)
4. Persist, then sweep tokens minted since the user was loaded
5. Publish PasswordResetCompleted event
6. Invalidate cached projection
"""

from dsagrind.application.commands.auth_commands import ResetPassword
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.events import PasswordResetCompleted
from dsagrind.domain.protocols import (
    EventBusProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)


class ResetPasswordHandler:
    """Handler for the ResetPassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        user_cache: UserCache,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._user_cache = user_cache
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: ResetPassword) -> Result[bool, NotFoundError]:
        """Handle the ResetPassword command.

        Returns:
            Success(True) after the password was replaced.
            Failure(NotFoundError) for an unknown, used or expired token.
        """
        # Step 1: Lookup
        user = await self._user_repo.find_by_reset_token(cmd.token)
        if user is None or not user.has_valid_reset_token(cmd.token):
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.TOKEN_NOT_FOUND,
                    message="Invalid or expired reset token",
                    resource_type="PasswordResetToken",
                    resource_id="",
                )
            )

        # Step 2-4: New password, revoke sessions, persist
        user.set_password(self._password_service.hash_password(cmd.new_password))
        revoked = user.revoke_all_refresh_tokens(cmd.ip_address)
        await self._user_repo.update(user)
        revoked += await self._user_repo.revoke_all_refresh_tokens(
            user.id, cmd.ip_address
        )

        # Step 5: Publish event
        await self._event_bus.publish(
            PasswordResetCompleted(user_id=user.id, ip_address=cmd.ip_address)
        )

        # Step 6: Cache
        await self._user_cache.invalidate(user.id)
        self._logger.info(
            "password_reset_completed", user_id=str(user.id), sessions_revoked=revoked
        )
        return Success(value=True)
