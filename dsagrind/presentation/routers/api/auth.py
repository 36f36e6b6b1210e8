"""Auth router.

Credential and session lifecycle endpoints.

Endpoints:
    POST /api/auth/login                - Log in (rate limited per email)
    POST /api/auth/register             - Create an account and a session
    POST /api/auth/refresh              - Rotate the refresh token
    POST /api/auth/revoke               - Revoke a refresh token
    POST /api/auth/logout               - Revoke a refresh token (records logout)
    POST /api/auth/revoke-all           - Revoke all of the caller's tokens
    POST /api/auth/verify-email         - Verify an email address
    POST /api/auth/resend-verification  - Re-send the verification email
    POST /api/auth/forgot-password      - Request a password reset
    POST /api/auth/reset-password       - Reset the password with a token
    POST /api/auth/change-password      - Change the caller's password
    GET  /api/auth/me                   - Caller's user projection
    PUT  /api/auth/profile              - Update the caller's profile
    POST /api/auth/validate             - Check an access token

Refresh tokens travel in the body and as an HttpOnly cookie; the body value
wins when both are present. "Nothing to do" outcomes (unknown token,
already verified email) answer 200 with ``success: false``.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from dsagrind.application.commands.auth_commands import (
    ChangePassword,
    ForgotPassword,
    Login,
    Logout,
    RefreshSession,
    Register,
    ResendEmailVerification,
    ResetPassword,
    RevokeAllTokens,
    RevokeToken,
    UpdateProfile,
    VerifyEmail,
)
from dsagrind.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from dsagrind.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from dsagrind.application.commands.handlers.login_handler import LoginHandler
from dsagrind.application.commands.handlers.logout_handler import LogoutHandler
from dsagrind.application.commands.handlers.refresh_session_handler import (
    RefreshSessionHandler,
)
from dsagrind.application.commands.handlers.register_handler import RegisterHandler
from dsagrind.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from dsagrind.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from dsagrind.application.commands.handlers.revoke_all_tokens_handler import (
    RevokeAllTokensHandler,
)
from dsagrind.application.commands.handlers.revoke_token_handler import (
    RevokeTokenHandler,
)
from dsagrind.application.commands.handlers.update_profile_handler import (
    UpdateProfileHandler,
)
from dsagrind.application.commands.handlers.verify_email_handler import (
    VerifyEmailHandler,
)
from dsagrind.application.queries.auth_queries import GetUser, ValidateToken
from dsagrind.application.queries.handlers.get_user_handler import GetUserHandler
from dsagrind.application.queries.handlers.token_query_handlers import (
    ValidateTokenHandler,
)
from dsagrind.core.container import (
    get_change_password_handler,
    get_forgot_password_handler,
    get_get_user_handler,
    get_login_handler,
    get_logout_handler,
    get_refresh_session_handler,
    get_register_handler,
    get_resend_verification_handler,
    get_reset_password_handler,
    get_revoke_all_tokens_handler,
    get_revoke_token_handler,
    get_update_profile_handler,
    get_validate_token_handler,
    get_verify_email_handler,
)
from dsagrind.core.errors import DomainError, NotFoundError
from dsagrind.core.result import Failure, Success
from dsagrind.presentation.routers.api.errors import (
    ErrorResponseBuilder,
    ProblemDetails,
)
from dsagrind.presentation.routers.api.middleware.auth_dependencies import (
    CurrentUser,
    get_client_ip,
    get_current_user,
)
from dsagrind.presentation.routers.api.middleware.trace_middleware import (
    get_trace_id,
)
from dsagrind.presentation.routers.api.session_cookies import (
    clear_refresh_cookie,
    read_refresh_cookie,
    set_refresh_cookie,
)
from dsagrind.schemas.auth_schemas import (
    AuthResponseSchema,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    UserResponse,
    ValidateTokenRequest,
    ValidateTokenResponse,
    VerifyEmailRequest,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _error_response(request: Request, error: DomainError) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(error, request, get_trace_id())


def _resolve_refresh_token(request: Request, data: RefreshTokenRequest | None) -> str:
    """Body value first, then the cookie.

    Raises:
        HTTPException 400: If neither carries a token.
    """
    token = (data.refresh_token if data else None) or read_refresh_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Refresh token is required",
        )
    return token


# =============================================================================
# Login / Registration
# =============================================================================


@router.post(
    "/login",
    response_model=AuthResponseSchema,
    responses={
        401: {"description": "Invalid credentials", "model": ProblemDetails},
        403: {"description": "Email not verified", "model": ProblemDetails},
        429: {"description": "Too many attempts", "model": ProblemDetails},
    },
    summary="Log in",
    description="Authenticate with email and password and issue a session.",
)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    handler: LoginHandler = Depends(get_login_handler),
) -> AuthResponseSchema | JSONResponse:
    """Log in.

    POST /api/auth/login → 200 OK

    Returns:
        AuthResponseSchema on success, refresh token also set as a cookie.
        JSONResponse with error on failure (401/403/429).
    """
    result = await handler.handle(
        Login(
            email=data.email,
            password=data.password,
            ip_address=get_client_ip(request),
        )
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=auth):
            set_refresh_cookie(response, auth.refresh_token)
            return AuthResponseSchema.from_dto(auth)


@router.post(
    "/register",
    response_model=AuthResponseSchema,
    responses={
        409: {"description": "Email or username taken", "model": ProblemDetails},
    },
    summary="Register",
    description="Create a password account. A verification email is sent.",
)
async def register(
    request: Request,
    response: Response,
    data: RegisterRequest,
    handler: RegisterHandler = Depends(get_register_handler),
) -> AuthResponseSchema | JSONResponse:
    result = await handler.handle(
        Register(
            username=data.username,
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            ip_address=get_client_ip(request),
        )
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=auth):
            set_refresh_cookie(response, auth.refresh_token)
            return AuthResponseSchema.from_dto(auth)


# =============================================================================
# Refresh Tokens
# =============================================================================


@router.post(
    "/refresh",
    response_model=AuthResponseSchema,
    responses={
        400: {"description": "Refresh token missing", "model": ProblemDetails},
        401: {"description": "Invalid or already used token", "model": ProblemDetails},
    },
    summary="Refresh session",
    description="Exchange a refresh token for a new access/refresh token pair.",
)
async def refresh(
    request: Request,
    response: Response,
    data: RefreshTokenRequest | None = None,
    handler: RefreshSessionHandler = Depends(get_refresh_session_handler),
) -> AuthResponseSchema | JSONResponse:
    """Rotate the refresh token.

    POST /api/auth/refresh → 200 OK

    The presented token is revoked and replaced; presenting it again fails.
    """
    result = await handler.handle(
        RefreshSession(
            refresh_token=_resolve_refresh_token(request, data),
            ip_address=get_client_ip(request),
        )
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=auth):
            set_refresh_cookie(response, auth.refresh_token)
            return AuthResponseSchema.from_dto(auth)


@router.post(
    "/revoke",
    response_model=MessageResponse,
    summary="Revoke refresh token",
)
async def revoke(
    request: Request,
    response: Response,
    data: RefreshTokenRequest | None = None,
    handler: RevokeTokenHandler = Depends(get_revoke_token_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        RevokeToken(
            refresh_token=_resolve_refresh_token(request, data),
            ip_address=get_client_ip(request),
        )
    )
    clear_refresh_cookie(response)

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(success=True, message="Token revoked successfully")


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(
    request: Request,
    response: Response,
    data: RefreshTokenRequest | None = None,
    handler: LogoutHandler = Depends(get_logout_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        Logout(
            refresh_token=_resolve_refresh_token(request, data),
            ip_address=get_client_ip(request),
        )
    )
    clear_refresh_cookie(response)

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(success=True, message="Logged out successfully")


@router.post(
    "/revoke-all",
    response_model=MessageResponse,
    responses={401: {"description": "Not authenticated", "model": ProblemDetails}},
    summary="Revoke all sessions",
    description="Revoke every refresh token of the authenticated user.",
)
async def revoke_all(
    request: Request,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    handler: RevokeAllTokensHandler = Depends(get_revoke_all_tokens_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        RevokeAllTokens(
            user_id=current_user.user_id,
            ip_address=get_client_ip(request),
        )
    )
    clear_refresh_cookie(response)

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(
                success=True, message="All tokens revoked successfully"
            )


# =============================================================================
# Email Verification
# =============================================================================


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    summary="Verify email",
)
async def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    handler: VerifyEmailHandler = Depends(get_verify_email_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(VerifyEmail(token=data.token))

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(success=True, message="Email verified successfully")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    summary="Resend verification email",
)
async def resend_verification(
    request: Request,
    data: ResendVerificationRequest,
    handler: ResendVerificationHandler = Depends(get_resend_verification_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(ResendEmailVerification(email=data.email))

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(
                success=True, message="Verification email sent successfully"
            )


# =============================================================================
# Passwords
# =============================================================================


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request password reset",
    description="Always succeeds, whether or not the email has an account.",
)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    handler: ForgotPasswordHandler = Depends(get_forgot_password_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        ForgotPassword(email=data.email, ip_address=get_client_ip(request))
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(
                success=True,
                message=(
                    "If an account with that email exists, "
                    "a password reset link has been sent"
                ),
            )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
    description="Set a new password with a reset token. Ends every session.",
)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    handler: ResetPasswordHandler = Depends(get_reset_password_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        ResetPassword(
            token=data.token,
            new_password=data.new_password,
            ip_address=get_client_ip(request),
        )
    )

    match result:
        case Failure(error=NotFoundError(message=message)):
            return MessageResponse(success=False, message=message)
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(success=True, message="Password reset successfully")


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Current password is incorrect", "model": ProblemDetails},
        401: {"description": "Not authenticated", "model": ProblemDetails},
    },
    summary="Change password",
)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    handler: ChangePasswordHandler = Depends(get_change_password_handler),
) -> MessageResponse | JSONResponse:
    result = await handler.handle(
        ChangePassword(
            user_id=current_user.user_id,
            current_password=data.current_password,
            new_password=data.new_password,
        )
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success():
            return MessageResponse(success=True, message="Password changed successfully")


# =============================================================================
# Current User
# =============================================================================


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"description": "Not authenticated", "model": ProblemDetails},
        404: {"description": "User not found", "model": ProblemDetails},
    },
    summary="Current user",
)
async def me(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    handler: GetUserHandler = Depends(get_get_user_handler),
) -> UserResponse | JSONResponse:
    result = await handler.handle(GetUser(user_id=current_user.user_id))

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=user):
            return UserResponse.from_projection(user)


@router.put(
    "/profile",
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid profile field", "model": ProblemDetails},
        401: {"description": "Not authenticated", "model": ProblemDetails},
        404: {"description": "User not found", "model": ProblemDetails},
    },
    summary="Update profile",
)
async def update_profile(
    request: Request,
    data: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    handler: UpdateProfileHandler = Depends(get_update_profile_handler),
) -> UserResponse | JSONResponse:
    result = await handler.handle(
        UpdateProfile(user_id=current_user.user_id, **data.model_dump())
    )

    match result:
        case Failure(error=error):
            return _error_response(request, error)
        case Success(value=user):
            return UserResponse.from_projection(user)


@router.post(
    "/validate",
    response_model=ValidateTokenResponse,
    summary="Validate access token",
)
async def validate(
    data: ValidateTokenRequest,
    handler: ValidateTokenHandler = Depends(get_validate_token_handler),
) -> ValidateTokenResponse:
    result = await handler.handle(ValidateToken(token=data.token))
    return ValidateTokenResponse(is_valid=isinstance(result, Success) and result.value)
