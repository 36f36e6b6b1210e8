"""Password hashing protocol for the domain layer.

Implementations must use an adaptive, salted algorithm with the salt and
cost embedded in the hash string.
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface."""

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password (same input yields different hashes)."""
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Constant-time verification. False for malformed hashes, never raises."""
        ...
