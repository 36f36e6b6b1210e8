"""Forgot password handler.

Always returns Success(True) so the response never reveals whether an
account exists. For a known email a time-boxed reset token is stored,
emailed and a PasswordResetRequested event is published.
"""

from datetime import UTC, datetime, timedelta

from dsagrind.application.commands.auth_commands import ForgotPassword
from dsagrind.application.services import deliver_email
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Result, Success
from dsagrind.domain.events import PasswordResetRequested
from dsagrind.domain.protocols import (
    EmailProtocol,
    EventBusProtocol,
    LoggerProtocol,
    SecureTokenProtocol,
    UserRepository,
)


class ForgotPasswordHandler:
    """Handler for the ForgotPassword command.

    Attributes:
        reset_expire_hours: Lifetime of reset tokens.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        secure_token_service: SecureTokenProtocol,
        email_service: EmailProtocol,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        reset_expire_hours: int = 1,
    ) -> None:
        self._user_repo = user_repo
        self._secure_token_service = secure_token_service
        self._email_service = email_service
        self._event_bus = event_bus
        self._logger = logger
        self.reset_expire_hours = reset_expire_hours

    async def handle(self, cmd: ForgotPassword) -> Result[bool, DomainError]:
        user = await self._user_repo.find_by_email(cmd.email)
        if user is None:
            self._logger.info("password_reset_unknown_email", ip_address=cmd.ip_address)
            return Success(value=True)

        token = self._secure_token_service.generate_reset_token()
        user.request_password_reset(
            token, datetime.now(UTC) + timedelta(hours=self.reset_expire_hours)
        )
        await self._user_repo.update(user)

        await deliver_email(
            self._email_service.send_password_reset(user.email, user.username, token),
            logger=self._logger,
            email_type="password_reset",
            user_id=str(user.id),
        )
        await self._event_bus.publish(
            PasswordResetRequested(
                user_id=user.id, email=user.email, ip_address=cmd.ip_address
            )
        )
        self._logger.info("password_reset_requested", user_id=str(user.id))
        return Success(value=True)
