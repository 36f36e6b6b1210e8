"""OAuth client over httpx.

Implements OAuthClientProtocol for the authorization-code flow:

Flow:
    1. generate_authorization_url stores ``oauth_state:<state>`` -> provider
       (short TTL) and returns the consent URL
    2. exchange_code validates and consumes the state, exchanges the code
       for an access token, then fetches and normalizes the profile

Architecture:
    - Infrastructure layer (adapter for external APIs)
    - Returns Result types (no exceptions for provider failures)
    - Structured logging with provider context, never token values
"""

from typing import Any
from urllib.parse import urlencode

import httpx

from dsagrind.core.constants import OAUTH_STATE_KEY
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError, ValidationError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.entities import OAuthUser
from dsagrind.domain.enums import OAuthProvider
from dsagrind.domain.errors import AuthError
from dsagrind.domain.protocols import CacheProtocol, LoggerProtocol
from dsagrind.infrastructure.enums import InfrastructureErrorCode
from dsagrind.infrastructure.errors import ExternalServiceError
from dsagrind.infrastructure.oauth.provider_settings import OAuthProviderSettings

_GITHUB_ACCEPT = "application/vnd.github+json"


class HttpxOAuthClient:
    """Google/GitHub OAuth client.

    Attributes:
        _providers: Provider -> endpoints and credentials.
        _cache: Stores anti-CSRF state values.
        _state_ttl: State lifetime in seconds.
        _timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        *,
        providers: dict[OAuthProvider, OAuthProviderSettings],
        cache: CacheProtocol,
        logger: LoggerProtocol,
        state_ttl_seconds: int = 600,
        timeout: float = 10.0,
        user_agent: str = "DSAGrind",
    ) -> None:
        self._providers = providers
        self._cache = cache
        self._logger = logger
        self._state_ttl = state_ttl_seconds
        self._timeout = timeout
        self._user_agent = user_agent

    # ---------------------------------------------------------------------
    # Authorization URL
    # ---------------------------------------------------------------------

    async def generate_authorization_url(
        self, provider: OAuthProvider, state: str
    ) -> Result[str, DomainError]:
        """Store ``state`` for ``provider`` and build the consent URL."""
        config = self._providers.get(provider)
        if config is None:
            return Failure(error=_unsupported(provider))

        stored = await self._cache.set(
            OAUTH_STATE_KEY.format(state=state), provider.value, ttl=self._state_ttl
        )
        if isinstance(stored, Failure):
            return stored

        params = {
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "response_type": "code",
            "scope": config.scope,
            "state": state,
            **config.extra_authorize_params,
        }
        return Success(value=f"{config.authorize_url}?{urlencode(params)}")

    # ---------------------------------------------------------------------
    # Code exchange
    # ---------------------------------------------------------------------

    async def exchange_code(
        self, provider: OAuthProvider, code: str, state: str
    ) -> Result[OAuthUser, DomainError]:
        """Exchange an authorization code for a normalized identity."""
        config = self._providers.get(provider)
        if config is None:
            return Failure(error=_unsupported(provider))

        state_check = await self._consume_state(provider, state)
        if isinstance(state_check, Failure):
            return state_check

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                token_result = await self._exchange_token(client, provider, config, code)
                match token_result:
                    case Failure(error=error):
                        return Failure(error=error)
                    case Success(value=access_token):
                        pass

                match provider:
                    case OAuthProvider.GOOGLE:
                        return await self._google_user(client, config, access_token)
                    case OAuthProvider.GITHUB:
                        return await self._github_user(client, config, access_token)
        except httpx.HTTPError as e:
            self._logger.warning(
                "oauth_http_error", provider=provider.value, error=str(e)
            )
            return Failure(
                error=ExternalServiceError(
                    code=ErrorCode.EXTERNAL_SERVICE_ERROR,
                    infrastructure_code=(
                        InfrastructureErrorCode.EXTERNAL_SERVICE_TIMEOUT
                        if isinstance(e, httpx.TimeoutException)
                        else InfrastructureErrorCode.EXTERNAL_SERVICE_UNAVAILABLE
                    ),
                    message=f"{provider.value} OAuth request failed",
                    service_name=provider.value,
                    details={"error": str(e), "type": type(e).__name__},
                )
            )

        return Failure(error=_unsupported(provider))

    async def _consume_state(
        self, provider: OAuthProvider, state: str
    ) -> Result[None, DomainError]:
        """Validate the stored state and delete it (single use)."""
        key = OAUTH_STATE_KEY.format(state=state)
        match await self._cache.get(key):
            case Success(value=stored) if stored == provider.value:
                await self._cache.delete(key)
                return Success(value=None)
            case Success(value=stored):
                self._logger.warning(
                    "oauth_state_mismatch",
                    provider=provider.value,
                    state_found=stored is not None,
                )
                return Failure(error=_oauth_failed("Invalid or expired OAuth state"))
            case Failure(error=error):
                return Failure(error=error)
        return Failure(error=_oauth_failed("Invalid or expired OAuth state"))

    async def _exchange_token(
        self,
        client: httpx.AsyncClient,
        provider: OAuthProvider,
        config: OAuthProviderSettings,
        code: str,
    ) -> Result[str, DomainError]:
        data = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
            "redirect_uri": config.redirect_uri,
        }
        if provider is OAuthProvider.GOOGLE:
            data["grant_type"] = "authorization_code"

        response = await client.post(
            config.token_url, data=data, headers={"Accept": "application/json"}
        )
        body = _json_body(response)
        access_token = body.get("access_token") if body else None
        if response.status_code != 200 or not access_token:
            self._logger.warning(
                "oauth_token_exchange_failed",
                provider=provider.value,
                status_code=response.status_code,
                provider_error=(body or {}).get("error"),
            )
            return Failure(error=_oauth_failed("Failed to exchange authorization code"))
        return Success(value=str(access_token))

    async def _google_user(
        self, client: httpx.AsyncClient, config: OAuthProviderSettings, access_token: str
    ) -> Result[OAuthUser, DomainError]:
        response = await client.get(
            config.user_info_url, headers={"Authorization": f"Bearer {access_token}"}
        )
        info = _json_body(response)
        if response.status_code != 200 or not info or not info.get("id"):
            return Failure(error=_oauth_failed("Failed to fetch Google profile"))
        if not info.get("email"):
            return Failure(error=_oauth_failed("Google account has no email address"))

        return Success(
            value=OAuthUser(
                provider=OAuthProvider.GOOGLE,
                provider_id=str(info["id"]),
                email=info["email"],
                first_name=info.get("given_name"),
                last_name=info.get("family_name"),
                avatar=info.get("picture"),
            )
        )

    async def _github_user(
        self, client: httpx.AsyncClient, config: OAuthProviderSettings, access_token: str
    ) -> Result[OAuthUser, DomainError]:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": _GITHUB_ACCEPT,
            "User-Agent": self._user_agent,
        }
        response = await client.get(config.user_info_url, headers=headers)
        info = _json_body(response)
        if response.status_code != 200 or not info or not info.get("id"):
            return Failure(error=_oauth_failed("Failed to fetch GitHub profile"))

        email = info.get("email")
        if not email and config.emails_url:
            email = await self._github_email(client, config.emails_url, headers)
        if not email:
            return Failure(error=_oauth_failed("GitHub account has no usable email address"))

        first_name, last_name = _split_name(info.get("name"))
        return Success(
            value=OAuthUser(
                provider=OAuthProvider.GITHUB,
                provider_id=str(info["id"]),
                email=email,
                username=info.get("login"),
                first_name=first_name,
                last_name=last_name,
                avatar=info.get("avatar_url"),
            )
        )

    async def _github_email(
        self, client: httpx.AsyncClient, emails_url: str, headers: dict[str, str]
    ) -> str | None:
        """Primary address, else the first verified one."""
        response = await client.get(emails_url, headers=headers)
        if response.status_code != 200:
            return None
        try:
            emails = response.json()
        except ValueError:
            return None
        if not isinstance(emails, list):
            return None

        for entry in emails:
            if entry.get("primary") and entry.get("email"):
                return entry["email"]
        for entry in emails:
            if entry.get("verified") and entry.get("email"):
                return entry["email"]
        return None


def _json_body(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _split_name(name: str | None) -> tuple[str | None, str | None]:
    if not name:
        return None, None
    parts = name.strip().split(" ", 1)
    return parts[0], (parts[1] if len(parts) > 1 else None)


def _oauth_failed(message: str) -> AuthError:
    return AuthError(code=ErrorCode.OAUTH_FAILED, message=message)


def _unsupported(provider: OAuthProvider) -> ValidationError:
    return ValidationError(
        code=ErrorCode.UNSUPPORTED_PROVIDER,
        message=f"OAuth provider '{provider.value}' is not configured",
        field="provider",
    )
