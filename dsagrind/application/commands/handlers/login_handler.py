"""Login handler.

Flow:
1. Check the login rate limit for the lower-cased email (no increment)
2. Find user by email
3. Verify password (OAuth-only accounts never match)
4. Clear the rate limit counter on success
5. Check email verified
6. Issue session (access + refresh token, prune, persist, cache)
7. Publish UserLogin event
8. Return Success(AuthResponse)

On wrong credentials the rate limit counter is incremented and its window
re-armed to the full length before returning INVALID_CREDENTIALS. Unknown
email, missing password hash and wrong password share one error.
"""

from dsagrind.application.commands.auth_commands import Login
from dsagrind.application.dtos import AuthResponse
from dsagrind.application.services import SessionIssuer
from dsagrind.core.constants import LOGIN_ATTEMPTS_KEY, PASSWORD_LOGIN_METHOD
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.errors import AuthError, RateLimitError
from dsagrind.domain.events import UserLogin
from dsagrind.domain.protocols import (
    EventBusProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    RateLimitProtocol,
    UserRepository,
)


class LoginError:
    """Login error messages."""

    INVALID_CREDENTIALS = "Invalid email or password"
    EMAIL_NOT_VERIFIED = "Please verify your email address before logging in"
    RATE_LIMITED = "Too many login attempts. Please try again later"


class LoginHandler:
    """Handler for the Login command.

    Attributes:
        attempts_limit: Failed attempts allowed per window.
        window_seconds: Length of the throttling window.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        rate_limiter: RateLimitProtocol,
        session_issuer: SessionIssuer,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        attempts_limit: int = 5,
        window_seconds: int = 900,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._rate_limiter = rate_limiter
        self._session_issuer = session_issuer
        self._event_bus = event_bus
        self._logger = logger
        self.attempts_limit = attempts_limit
        self.window_seconds = window_seconds

    async def handle(self, cmd: Login) -> Result[AuthResponse, DomainError]:
        """Handle the Login command.

        Returns:
            Success(AuthResponse) on success.
            Failure(RateLimitError) when the email is throttled.
            Failure(AuthError) with INVALID_CREDENTIALS or EMAIL_NOT_VERIFIED.
        """
        # Same normalisation as the email lookup, so case variants share a counter
        key = LOGIN_ATTEMPTS_KEY.format(email=cmd.email.lower())

        # Step 1: Rate limit precondition
        match await self._rate_limiter.check(key, self.attempts_limit):
            case Success(value=limit) if not limit.allowed:
                self._logger.warning(
                    "login_rate_limited",
                    email=cmd.email,
                    ip_address=cmd.ip_address,
                    attempts=limit.count,
                )
                return Failure(
                    error=RateLimitError(
                        code=ErrorCode.RATE_LIMITED,
                        message=LoginError.RATE_LIMITED,
                        retry_after=limit.retry_after or self.window_seconds,
                    )
                )

        # Step 2: Find user
        user = await self._user_repo.find_by_email(cmd.email)

        # Step 3: Verify password
        if (
            user is None
            or user.password_hash is None
            or not self._password_service.verify_password(
                cmd.password, user.password_hash
            )
        ):
            await self._rate_limiter.register_failure(key, self.window_seconds)
            self._logger.info(
                "login_failed",
                email=cmd.email,
                ip_address=cmd.ip_address,
                user_found=user is not None,
            )
            return Failure(
                error=AuthError(
                    code=ErrorCode.INVALID_CREDENTIALS,
                    message=LoginError.INVALID_CREDENTIALS,
                )
            )

        # Step 4: Clear throttling
        await self._rate_limiter.reset(key)

        # Step 5: Email must be verified
        if not user.is_email_verified:
            self._logger.info("login_email_not_verified", user_id=str(user.id))
            return Failure(
                error=AuthError(
                    code=ErrorCode.EMAIL_NOT_VERIFIED,
                    message=LoginError.EMAIL_NOT_VERIFIED,
                )
            )

        # Step 6: Issue session
        user.record_login()
        response = await self._session_issuer.issue(user, cmd.ip_address)

        # Step 7: Publish event
        await self._event_bus.publish(
            UserLogin(
                user_id=user.id,
                username=user.username,
                ip_address=cmd.ip_address,
                login_method=PASSWORD_LOGIN_METHOD,
            )
        )
        self._logger.info(
            "login_succeeded", user_id=str(user.id), ip_address=cmd.ip_address
        )

        # Step 8: Return response
        return Success(value=response)
