"""Opaque random token generation.

Refresh tokens are standard base64 of 64 random bytes. Verification and
reset tokens are URL-safe base64 of 32 random bytes without padding, so
they can be dropped into a query string unescaped.
"""

import base64
import secrets

from dsagrind.core.constants import REFRESH_TOKEN_BYTES, VERIFICATION_TOKEN_BYTES


class SecureTokenService:
    """Implements SecureTokenProtocol with the ``secrets`` CSPRNG."""

    def generate_refresh_token(self) -> str:
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def generate_verification_token(self) -> str:
        return secrets.token_urlsafe(VERIFICATION_TOKEN_BYTES).rstrip("=")

    def generate_reset_token(self) -> str:
        return secrets.token_urlsafe(VERIFICATION_TOKEN_BYTES).rstrip("=")
