"""Resend email verification handler.

Replaces the pending verification token and emails the new one. Nothing
happens for unknown or already verified accounts.
"""

from dsagrind.application.commands.auth_commands import ResendEmailVerification
from dsagrind.application.services import deliver_email
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.protocols import (
    EmailProtocol,
    LoggerProtocol,
    SecureTokenProtocol,
    UserRepository,
)


class ResendVerificationHandler:
    """Handler for the ResendEmailVerification command."""

    def __init__(
        self,
        user_repo: UserRepository,
        secure_token_service: SecureTokenProtocol,
        email_service: EmailProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._secure_token_service = secure_token_service
        self._email_service = email_service
        self._logger = logger

    async def handle(
        self, cmd: ResendEmailVerification
    ) -> Result[bool, NotFoundError]:
        user = await self._user_repo.find_by_email(cmd.email)
        if user is None or user.is_email_verified:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="No unverified account for this email",
                    resource_type="User",
                    resource_id=cmd.email,
                )
            )

        token = self._secure_token_service.generate_verification_token()
        user.email_verification_token = token
        await self._user_repo.update(user)

        await deliver_email(
            self._email_service.send_email_verification(
                user.email, user.username, token
            ),
            logger=self._logger,
            email_type="email_verification",
            user_id=str(user.id),
        )
        self._logger.info("verification_resent", user_id=str(user.id))
        return Success(value=True)
