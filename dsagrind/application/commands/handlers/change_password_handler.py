"""Change password handler.

Requires the current password. Existing sessions are kept; only a reset
revokes them.
"""

from dsagrind.application.commands.auth_commands import ChangePassword
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError, NotFoundError, ValidationError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.events import PasswordChanged
from dsagrind.domain.protocols import (
    EventBusProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)


class ChangePasswordError:
    """Change password error messages."""

    USER_NOT_FOUND = "User not found"
    PASSWORD_NOT_SET = "Account has no password; sign in with your provider"
    INCORRECT_PASSWORD = "Current password is incorrect"


class ChangePasswordHandler:
    """Handler for the ChangePassword command."""

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

    async def handle(self, cmd: ChangePassword) -> Result[bool, DomainError]:
        """Handle the ChangePassword command.

        Returns:
            Success(True) when the password was changed.
            Failure(NotFoundError) for an unknown user.
            Failure(ValidationError) with PASSWORD_NOT_SET or VALIDATION_FAILED
            when the current password cannot be verified.
        """
        user = await self._user_repo.find_by_id(cmd.user_id)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message=ChangePasswordError.USER_NOT_FOUND,
                    resource_type="User",
                    resource_id=str(cmd.user_id),
                )
            )

        if user.password_hash is None:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.PASSWORD_NOT_SET,
                    message=ChangePasswordError.PASSWORD_NOT_SET,
                    field="current_password",
                )
            )

        if not self._password_service.verify_password(
            cmd.current_password, user.password_hash
        ):
            self._logger.info("password_change_rejected", user_id=str(user.id))
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message=ChangePasswordError.INCORRECT_PASSWORD,
                    field="current_password",
                )
            )

        user.set_password(self._password_service.hash_password(cmd.new_password))
        await self._user_repo.update(user)
        await self._user_cache.invalidate(user.id)
        await self._event_bus.publish(PasswordChanged(user_id=user.id))
        self._logger.info("password_changed", user_id=str(user.id))
        return Success(value=True)
