"""Security adapters: password hashing, JWT signing, opaque tokens."""

from dsagrind.infrastructure.security.bcrypt_password_service import (
    BcryptPasswordService,
)
from dsagrind.infrastructure.security.jwt_service import JWTService
from dsagrind.infrastructure.security.secure_token_service import SecureTokenService

__all__ = ["BcryptPasswordService", "JWTService", "SecureTokenService"]
