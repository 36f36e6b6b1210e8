"""JWT token service (adapter).

Implements TokenGenerationProtocol using PyJWT with a symmetric key.

Security:
    - Validation accepts exactly the configured algorithm (no "none", no
      algorithm substitution)
    - Issuer, audience, exp, iat and sub are required and verified
    - Small clock-skew leeway on time-based claims
    - Unique JWT ID (jti, UUIDv7) per token
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from uuid_extensions import uuid7

from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.entities import User
from dsagrind.domain.errors import AuthError

_REQUIRED_CLAIMS = ["exp", "iat", "sub", "iss", "aud"]


class JWTService:
    """JWT access token generation and validation service.

    Usage:
        token_service = get_token_service()
        token = token_service.generate_access_token(user)
        match token_service.validate_access_token(token):
            case Success(value=claims):
                user_id = UUID(claims["sub"])
            case Failure(error=error):
                ...
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        issuer: str = "DSAGrind",
        audience: str = "DSAGrind-Users",
        expiration_minutes: int = 60,
        clock_skew_seconds: int = 30,
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Symmetric signing key, at least 32 characters.
            algorithm: Signing algorithm, the only one accepted on validation.
            issuer: ``iss`` claim written and required.
            audience: ``aud`` claim written and required.
            expiration_minutes: Lifetime written into ``exp``.
            clock_skew_seconds: Leeway applied to exp/iat checks.

        Raises:
            ValueError: If secret_key is too short.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience
        self._expiration_minutes = expiration_minutes
        self._leeway = timedelta(seconds=clock_skew_seconds)

    def generate_access_token(self, user: User) -> str:
        """Issue a signed access token for ``user``.

        Claims:
            sub, username, email, role, email_verified, subscription_plan,
            subscription_status, given_name/family_name (when set), jti,
            iat, exp, iss, aud.
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "role": user.role.value,
            "email_verified": user.is_email_verified,
            "subscription_plan": user.subscription_plan,
            "subscription_status": user.subscription_status,
            "jti": str(uuid7()),
            "iat": now,
            "exp": now + timedelta(minutes=self._expiration_minutes),
            "iss": self._issuer,
            "aud": self._audience,
        }
        if user.first_name:
            payload["given_name"] = user.first_name
        if user.last_name:
            payload["family_name"] = user.last_name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def _decode(self, token: str, *, verify_exp: bool) -> dict[str, Any]:
        return jwt.decode(
            token,
            self._secret_key,
            algorithms=[self._algorithm],
            audience=self._audience,
            issuer=self._issuer,
            leeway=self._leeway,
            options={"require": _REQUIRED_CLAIMS, "verify_exp": verify_exp},
        )

    def validate_access_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Validate a token and return its claims.

        Returns:
            Success(claims), or Failure(AuthError) with TOKEN_EXPIRED for an
            expired token and TOKEN_INVALID for anything else.
        """
        try:
            return Success(value=self._decode(token, verify_exp=True))
        except ExpiredSignatureError:
            return Failure(
                error=AuthError(code=ErrorCode.TOKEN_EXPIRED, message="Token has expired")
            )
        except InvalidTokenError:
            return Failure(
                error=AuthError(code=ErrorCode.TOKEN_INVALID, message="Invalid token")
            )

    def decode_expired_token(self, token: str) -> Result[dict[str, Any], DomainError]:
        """Decode a token ignoring only its expiry.

        Signature, algorithm, issuer and audience are still verified.
        """
        try:
            return Success(value=self._decode(token, verify_exp=False))
        except InvalidTokenError:
            return Failure(
                error=AuthError(code=ErrorCode.TOKEN_INVALID, message="Invalid token")
            )

    def get_claim(self, token: str, name: str) -> Any | None:
        match self.validate_access_token(token):
            case Success(value=claims):
                return claims.get(name)
            case _:
                return None

    def get_user_id(self, token: str) -> UUID | None:
        """Subject of a valid token as a UUID, None on any failure."""
        subject = self.get_claim(token, "sub")
        if subject is None:
            return None
        try:
            return UUID(str(subject))
        except ValueError:
            return None
