"""Registration handler.

Flow:
1. Check email and username uniqueness
2. Hash password
3. Create User entity (role user, unverified) with a verification token
4. Attach the first refresh token
5. Save user (a lost uniqueness race returns the store's ConflictError)
6. Send verification email (best effort)
7. Publish UserRegistered event
8. Return Success(AuthResponse)

The session is issued immediately; password login stays blocked until the
email is verified.
"""

from uuid_extensions import uuid7

from dsagrind.application.commands.auth_commands import Register
from dsagrind.application.dtos import AuthResponse
from dsagrind.application.services import SessionIssuer, deliver_email
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import ConflictError, DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.entities import User
from dsagrind.domain.enums import UserRole
from dsagrind.domain.events import UserRegistered
from dsagrind.domain.protocols import (
    EmailProtocol,
    EventBusProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    SecureTokenProtocol,
    UserRepository,
)


class RegistrationError:
    """Registration error messages."""

    EMAIL_TAKEN = "Email already registered"
    USERNAME_TAKEN = "Username already taken"


class RegisterHandler:
    """Handler for the Register command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        secure_token_service: SecureTokenProtocol,
        session_issuer: SessionIssuer,
        email_service: EmailProtocol,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._secure_token_service = secure_token_service
        self._session_issuer = session_issuer
        self._email_service = email_service
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: Register) -> Result[AuthResponse, DomainError]:
        """Handle the Register command.

        Returns:
            Success(AuthResponse) with a session for the new (unverified) user.
            Failure(ConflictError) with EMAIL_TAKEN or USERNAME_TAKEN.
        """
        # Step 1: Uniqueness
        if await self._user_repo.exists_by_email(cmd.email):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.EMAIL_TAKEN,
                    message=RegistrationError.EMAIL_TAKEN,
                    resource_type="User",
                    conflicting_field="email",
                )
            )
        if await self._user_repo.exists_by_username(cmd.username):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.USERNAME_TAKEN,
                    message=RegistrationError.USERNAME_TAKEN,
                    resource_type="User",
                    conflicting_field="username",
                )
            )

        # Step 2-3: Hash password, create entity
        verification_token = self._secure_token_service.generate_verification_token()
        user = User(
            id=uuid7(),
            username=cmd.username,
            email=cmd.email,
            password_hash=self._password_service.hash_password(cmd.password),
            first_name=cmd.first_name,
            last_name=cmd.last_name,
            role=UserRole.USER,
            is_email_verified=False,
            email_verification_token=verification_token,
        )

        # Step 4: First refresh token
        refresh_token = self._session_issuer.attach_refresh_token(
            user, cmd.ip_address
        )

        # Step 5: Persist
        saved = await self._user_repo.save(user)
        if isinstance(saved, Failure):
            self._logger.info(
                "registration_conflict",
                conflicting_field=saved.error.conflicting_field,
            )
            return saved

        # Step 6: Verification email
        await deliver_email(
            self._email_service.send_email_verification(
                user.email, user.username, verification_token
            ),
            logger=self._logger,
            email_type="email_verification",
            user_id=str(user.id),
        )

        # Step 7: Publish event
        await self._event_bus.publish(
            UserRegistered(user_id=user.id, username=user.username, email=user.email)
        )
        self._logger.info("user_registered", user_id=str(user.id))

        # Step 8: Session response
        return Success(value=await self._session_issuer.respond(user, refresh_token))
