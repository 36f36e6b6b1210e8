"""Authentication request/response schemas.

Endpoints (prefix /api/auth):
    POST /login                 - Log in with email and password
    POST /register              - Create an account
    POST /refresh               - Rotate the refresh token
    POST /revoke                - Revoke a refresh token
    POST /logout                - Revoke a refresh token and record a logout
    POST /revoke-all            - Revoke every refresh token of the caller
    POST /verify-email          - Consume an email verification token
    POST /resend-verification   - Re-send the verification email
    POST /forgot-password       - Request a password reset email
    POST /reset-password        - Set a new password with a reset token
    POST /change-password       - Change the caller's password
    GET  /me                    - Caller's user projection
    PUT  /profile               - Update the caller's profile
    POST /validate              - Check an access token
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from dsagrind.application.dtos import AuthResponse, UserProjection


# =============================================================================
# Users
# =============================================================================


class UserResponse(BaseModel):
    """Public user projection.

    Never contains password hashes, refresh tokens or pending
    verification/reset tokens.
    """

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Unique handle")
    email: str = Field(..., description="Account email")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    avatar: str | None = Field(None, description="Avatar URL")
    role: str = Field(..., description="Account role", examples=["user"])
    is_email_verified: bool = Field(..., description="Email verified")
    subscription_plan: str = Field(..., description="Subscription plan")
    subscription_status: str = Field(..., description="Subscription status")
    total_solved: int = Field(0, description="Solved problem count")
    rank: int = Field(0, description="Leaderboard rank")
    created_at: datetime = Field(..., description="Account creation time")
    last_login_at: datetime | None = Field(None, description="Last login time")
    profile: dict[str, Any] = Field(default_factory=dict, description="Profile")
    has_password: bool = Field(True, description="Password login available")
    linked_providers: list[str] = Field(
        default_factory=list,
        description="Linked OAuth providers",
        examples=[["github"]],
    )

    @classmethod
    def from_projection(cls, user: UserProjection) -> "UserResponse":
        return cls(**user.to_dict())


class UpdateProfileRequest(BaseModel):
    """Request schema for profile updates.

    PUT /api/auth/profile
    Fields omitted or null are left unchanged.
    """

    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)
    avatar: str | None = Field(None, max_length=500, description="http(s) URL")
    bio: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=100)
    website: str | None = Field(None, max_length=200, description="http(s) URL")
    company: str | None = Field(None, max_length=100)
    skills: list[str] | None = Field(None, max_length=50)
    preferences: dict[str, Any] | None = Field(
        None,
        description="theme, language and notification toggles",
        examples=[{"theme": "dark", "notifications": {"push": False}}],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "first_name": "Bob",
                "bio": "Graph problems enjoyer",
                "website": "https://bob.dev",
                "skills": ["python", "dp"],
            }
        }
    )


# =============================================================================
# Login / Registration
# =============================================================================


class LoginRequest(BaseModel):
    """Request schema for login.

    POST /api/auth/login
    """

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["bob@x.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password",
        examples=["Secret123!"],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "bob@x.com",
                "password": "Secret123!",
            }
        }
    )


class RegisterRequest(BaseModel):
    """Request schema for registration.

    POST /api/auth/register
    The session is issued immediately, but password login stays blocked
    until the email is verified.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Unique handle",
        examples=["bob"],
    )
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["bob@x.com"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (at least 6 characters)",
        examples=["Secret123!"],
    )
    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "bob",
                "email": "bob@x.com",
                "password": "Secret123!",
                "first_name": "Bob",
            }
        }
    )


class AuthResponseSchema(BaseModel):
    """Issued session (login, register, refresh, OAuth callback).

    The refresh token is also set as an HttpOnly cookie.
    """

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")
    token_type: str = Field(
        default="bearer", description="Token type for Authorization header"
    )
    expires_at: datetime = Field(
        ..., description="Access token expiry (15 minutes from issuance)"
    )
    user: UserResponse

    @classmethod
    def from_dto(cls, response: AuthResponse) -> "AuthResponseSchema":
        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            token_type=response.token_type,
            expires_at=response.expires_at,
            user=UserResponse.from_projection(response.user),
        )


# =============================================================================
# Refresh Tokens
# =============================================================================


class RefreshTokenRequest(BaseModel):
    """Refresh token in the body; when absent the cookie is used.

    POST /api/auth/refresh, /api/auth/revoke, /api/auth/logout
    """

    refresh_token: str | None = Field(
        None,
        min_length=1,
        max_length=256,
        description="Refresh token (falls back to the refreshToken cookie)",
    )


# =============================================================================
# Email Verification
# =============================================================================


class VerifyEmailRequest(BaseModel):
    """POST /api/auth/verify-email"""

    token: str = Field(..., min_length=1, max_length=256)


class ResendVerificationRequest(BaseModel):
    """POST /api/auth/resend-verification"""

    email: EmailStr = Field(..., examples=["bob@x.com"])


# =============================================================================
# Passwords
# =============================================================================


class ForgotPasswordRequest(BaseModel):
    """POST /api/auth/forgot-password"""

    email: EmailStr = Field(..., examples=["bob@x.com"])


class ResetPasswordRequest(BaseModel):
    """POST /api/auth/reset-password"""

    token: str = Field(..., min_length=1, max_length=256)
    new_password: str = Field(..., min_length=6, max_length=128)


class ChangePasswordRequest(BaseModel):
    """POST /api/auth/change-password"""

    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


# =============================================================================
# Tokens
# =============================================================================


class ValidateTokenRequest(BaseModel):
    """POST /api/auth/validate"""

    token: str = Field(..., min_length=1, description="Access token to check")


class ValidateTokenResponse(BaseModel):
    is_valid: bool = Field(..., description="Whether the token is currently valid")


# =============================================================================
# Generic outcome
# =============================================================================


class MessageResponse(BaseModel):
    """Boolean outcome of an operation.

    ``success`` is false for "nothing to do" outcomes (unknown or inactive
    token, already verified email, ...). These are not errors.
    """

    success: bool = Field(..., description="Whether the operation took effect")
    message: str = Field(..., description="Human-readable outcome")
