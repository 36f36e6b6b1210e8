"""OAuth router.

Endpoints:
    GET  /api/oauth/providers            - Supported providers
    GET  /api/oauth/{provider}/url       - Authorization URL (+ state)
    POST /api/oauth/{provider}/callback  - Exchange the code and issue a session
"""

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Query,
    Request,
    Response,
    status,
)
from fastapi.responses import JSONResponse

from dsagrind.application.commands.auth_commands import OAuthLogin
from dsagrind.application.commands.handlers.oauth_login_handler import (
    OAuthLoginHandler,
)
from dsagrind.application.queries.auth_queries import GenerateOAuthUrl
from dsagrind.application.queries.handlers.generate_oauth_url_handler import (
    GenerateOAuthUrlHandler,
)
from dsagrind.core.container import (
    get_generate_oauth_url_handler,
    get_logger,
    get_oauth_login_handler,
)
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Success
from dsagrind.domain.enums import OAuthProvider
from dsagrind.presentation.routers.api.errors import (
    ErrorResponseBuilder,
    ProblemDetails,
)
from dsagrind.presentation.routers.api.middleware.auth_dependencies import (
    get_client_ip,
)
from dsagrind.presentation.routers.api.middleware.trace_middleware import (
    get_trace_id,
)
from dsagrind.presentation.routers.api.session_cookies import set_refresh_cookie
from dsagrind.schemas.auth_schemas import AuthResponseSchema
from dsagrind.schemas.oauth_schemas import (
    OAuthCallbackRequest,
    OAuthProviderInfo,
    OAuthUrlResponse,
)

router = APIRouter(prefix="/oauth", tags=["OAuth"])

_DISPLAY_NAMES: dict[OAuthProvider, str] = {
    OAuthProvider.GOOGLE: "Google",
    OAuthProvider.GITHUB: "GitHub",
}


def _error_response(request: Request, error: DomainError) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(error, request, get_trace_id())


@router.get(
    "/providers",
    response_model=list[OAuthProviderInfo],
    summary="List OAuth providers",
)
async def list_providers() -> list[OAuthProviderInfo]:
    return [
        OAuthProviderInfo(
            name=provider.value,
            display_name=_DISPLAY_NAMES[provider],
            icon=provider.value,
        )
        for provider in OAuthProvider
    ]


@router.get(
    "/{provider}/url",
    response_model=OAuthUrlResponse,
    responses={
        400: {"description": "Unsupported provider", "model": ProblemDetails},
    },
    summary="Get authorization URL",
    description=(
        "Build the provider authorization URL. A state value is generated "
        "when none is supplied; it must be echoed back to the callback."
    ),
)
async def get_authorization_url(
    request: Request,
    provider: str = Path(..., description="Provider name", examples=["github"]),
    state: str | None = Query(None, max_length=512, description="Anti-CSRF state"),
    handler: GenerateOAuthUrlHandler = Depends(get_generate_oauth_url_handler),
) -> OAuthUrlResponse | JSONResponse:
    result = await handler.handle(GenerateOAuthUrl(provider=provider, state=state))

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=oauth_url):
            return OAuthUrlResponse(url=oauth_url.url, state=oauth_url.state)


@router.post(
    "/{provider}/callback",
    response_model=AuthResponseSchema,
    responses={
        400: {"description": "Provider error or missing code", "model": ProblemDetails},
        401: {"description": "OAuth exchange failed", "model": ProblemDetails},
    },
    summary="Complete OAuth login",
)
async def oauth_callback(
    request: Request,
    response: Response,
    data: OAuthCallbackRequest,
    provider: str = Path(..., description="Provider name", examples=["github"]),
    handler: OAuthLoginHandler = Depends(get_oauth_login_handler),
) -> AuthResponseSchema | JSONResponse:
    """Complete the authorization-code flow.

    POST /api/oauth/{provider}/callback → 200 OK

    Existing accounts are matched by provider id, then by email (linking the
    provider); otherwise a new verified account is created.
    """
    if data.error:
        get_logger().warning(
            "oauth_provider_error",
            provider=provider,
            error=data.error,
            error_description=data.error_description,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"OAuth error: {data.error_description or data.error}",
        )
    if not data.code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Authorization code is required",
        )

    result = await handler.handle(
        OAuthLogin(
            provider=provider,
            code=data.code,
            state=data.state,
            ip_address=get_client_ip(request),
        )
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=auth):
            set_refresh_cookie(response, auth.refresh_token)
            return AuthResponseSchema.from_dto(auth)
