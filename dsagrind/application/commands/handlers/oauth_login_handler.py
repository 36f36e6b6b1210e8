"""OAuth login handler.

Flow:
1. Resolve provider
2. Exchange code/state for the provider identity (state checked by the client)
3. Resolve the account:
   a. by provider-specific external id
   b. else by email, linking the external id (email becomes verified)
   c. else create a new account with a free username
4. Issue session exactly as password login does
5. Publish UserRegistered (new accounts) and UserLogin (login_method=provider)
6. Return Success(AuthResponse)

Provider rejections (bad code, bad state, missing email) are reported as
OAUTH_FAILED and the cause is logged. Network and cache faults pass through
unchanged.
"""

from uuid_extensions import uuid7

from dsagrind.application.commands.auth_commands import OAuthLogin
from dsagrind.application.dtos import AuthResponse
from dsagrind.application.queries.handlers.generate_oauth_url_handler import (
    unsupported_provider,
)
from dsagrind.application.services import SessionIssuer
from dsagrind.core.constants import USERNAME_SUFFIX_LIMIT
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.entities import OAuthUser, User
from dsagrind.domain.enums import OAuthProvider, UserRole
from dsagrind.domain.errors import AuthError
from dsagrind.domain.events import UserLogin, UserRegistered
from dsagrind.domain.protocols import (
    EventBusProtocol,
    LoggerProtocol,
    OAuthClientProtocol,
    UserRepository,
)

# Infrastructure faults keep their own status (502/500)
_PASSTHROUGH_CODES = frozenset(
    {ErrorCode.EXTERNAL_SERVICE_ERROR, ErrorCode.CACHE_ERROR}
)


class OAuthLoginHandler:
    """Handler for the OAuthLogin command."""

    def __init__(
        self,
        user_repo: UserRepository,
        oauth_client: OAuthClientProtocol,
        session_issuer: SessionIssuer,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._oauth_client = oauth_client
        self._session_issuer = session_issuer
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: OAuthLogin) -> Result[AuthResponse, DomainError]:
        """Handle the OAuthLogin command.

        Returns:
            Success(AuthResponse) on success.
            Failure(ValidationError) with UNSUPPORTED_PROVIDER.
            Failure(AuthError) with OAUTH_FAILED.
            Failure(ExternalServiceError | CacheError) unchanged.
        """
        # Step 1: Provider
        provider = OAuthProvider.parse(cmd.provider)
        if provider is None:
            return Failure(error=unsupported_provider(cmd.provider))

        # Step 2: Exchange
        match await self._oauth_client.exchange_code(provider, cmd.code, cmd.state):
            case Failure(error=error) if error.code in _PASSTHROUGH_CODES:
                self._logger.error(
                    "oauth_exchange_unavailable",
                    provider=provider.value,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return Failure(error=error)
            case Failure(error=error):
                self._logger.warning(
                    "oauth_exchange_failed",
                    provider=provider.value,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return Failure(
                    error=AuthError(
                        code=ErrorCode.OAUTH_FAILED,
                        message="OAuth authentication failed",
                    )
                )
            case Success(value=oauth_user):
                pass

        # Step 3: Resolve account
        created = False
        user = await self._user_repo.find_by_oauth_id(provider, oauth_user.provider_id)
        if user is None:
            user = await self._user_repo.find_by_email(oauth_user.email)
            if user is not None:
                user.link_oauth(provider, oauth_user.provider_id)
                self._logger.info(
                    "oauth_account_linked",
                    user_id=str(user.id),
                    provider=provider.value,
                )
            else:
                user = await self._new_user(oauth_user)
                created = True

        # Step 4: Session
        user.record_login()
        if created:
            refresh_token = self._session_issuer.attach_refresh_token(
                user, cmd.ip_address
            )
            saved = await self._user_repo.save(user)
            if isinstance(saved, Failure):
                return saved
            response = await self._session_issuer.respond(user, refresh_token)
        else:
            response = await self._session_issuer.issue(user, cmd.ip_address)

        # Step 5: Events
        if created:
            await self._event_bus.publish(
                UserRegistered(
                    user_id=user.id,
                    username=user.username,
                    email=user.email,
                    registration_method=provider.value,
                )
            )
        await self._event_bus.publish(
            UserLogin(
                user_id=user.id,
                username=user.username,
                ip_address=cmd.ip_address,
                login_method=provider.value,
            )
        )
        self._logger.info(
            "oauth_login_succeeded",
            user_id=str(user.id),
            provider=provider.value,
            created=created,
        )

        # Step 6: Response
        return Success(value=response)

    async def _new_user(self, oauth_user: OAuthUser) -> User:
        user = User(
            id=uuid7(),
            username=await self._free_username(oauth_user.base_username),
            email=oauth_user.email,
            first_name=oauth_user.first_name,
            last_name=oauth_user.last_name,
            avatar=oauth_user.avatar,
            role=UserRole.USER,
        )
        user.link_oauth(oauth_user.provider, oauth_user.provider_id)
        return user

    async def _free_username(self, base: str) -> str:
        """First of ``base``, ``base1``, ``base2``, ... not yet taken."""
        if not await self._user_repo.exists_by_username(base):
            return base
        for suffix in range(1, USERNAME_SUFFIX_LIMIT):
            candidate = f"{base}{suffix}"
            if not await self._user_repo.exists_by_username(candidate):
                return candidate
        return f"{base}{uuid7().hex[-8:]}"
