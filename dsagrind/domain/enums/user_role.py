"""User roles.

Usage:
    from dsagrind.domain.enums import UserRole

    if user.role == UserRole.ADMIN:
        ...
"""

from enum import Enum


class UserRole(str, Enum):
    """Account roles.

    String enum so the value serializes directly into the JWT ``role`` claim.
    """

    USER = "user"
    """Standard account. Assigned on registration and OAuth sign-up."""

    ADMIN = "admin"
    """Back-office administrator. Only assigned out of band."""
