"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol. Salt and cost factor are embedded in
every hash, so the cost can be raised later without invalidating old hashes.

Performance:
    - Cost factor 12 = 2^12 rounds, ~250ms per hash or verify

bcrypt only reads the first 72 bytes of a password; longer inputs are
truncated explicitly (current bcrypt releases reject them otherwise).
"""

import bcrypt

_BCRYPT_MAX_BYTES = 72


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        password_service = get_password_service()
        password_hash = password_service.hash_password("Secret123!")
        password_service.verify_password("Secret123!", password_hash)  # True
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor. Each +1 doubles the work.

        Raises:
            ValueError: If cost_factor is outside 10..20.
        """
        if cost_factor < 10:
            msg = "Cost factor must be at least 10 for security"
            raise ValueError(msg)
        if cost_factor > 20:
            msg = "Cost factor above 20 is impractically slow"
            raise ValueError(msg)

        self._cost_factor = cost_factor

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Returns:
            60-character bcrypt string ($2b$<cost>$<salt><hash>).
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True if password matches hash. False for a mismatch or for a
            malformed hash; never raises.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, AttributeError):
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
