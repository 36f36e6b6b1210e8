"""Verify email handler.

Flow:
1. Find user by verification token
2. Mark verified and consume the token
3. Publish UserEmailVerified event
4. Send welcome email (best effort)
5. Invalidate cached projection
"""

from dsagrind.application.commands.auth_commands import VerifyEmail
from dsagrind.application.services import UserCache, deliver_email
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.events import UserEmailVerified
from dsagrind.domain.protocols import (
    EmailProtocol,
    EventBusProtocol,
    LoggerProtocol,
    UserRepository,
)


class VerifyEmailHandler:
    """Handler for the VerifyEmail command."""

    def __init__(
        self,
        user_repo: UserRepository,
        user_cache: UserCache,
        email_service: EmailProtocol,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._user_cache = user_cache
        self._email_service = email_service
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: VerifyEmail) -> Result[bool, NotFoundError]:
        """Handle the VerifyEmail command.

        Returns:
            Success(True) once verified.
            Failure(NotFoundError) for an unknown or already consumed token.
        """
        # Step 1: Lookup
        user = await self._user_repo.find_by_verification_token(cmd.token)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.TOKEN_NOT_FOUND,
                    message="Invalid or already used verification token",
                    resource_type="EmailVerificationToken",
                    resource_id="",
                )
            )

        # Step 2: Consume token
        user.verify_email()
        await self._user_repo.update(user)

        # Step 3: Publish event
        await self._event_bus.publish(
            UserEmailVerified(user_id=user.id, email=user.email)
        )

        # Step 4: Welcome email
        await deliver_email(
            self._email_service.send_welcome_email(user.email, user.username),
            logger=self._logger,
            email_type="welcome",
            user_id=str(user.id),
        )

        # Step 5: Cache
        await self._user_cache.invalidate(user.id)
        self._logger.info("email_verified", user_id=str(user.id))
        return Success(value=True)
