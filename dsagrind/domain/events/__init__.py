"""Domain events.

Usage:
    from dsagrind.domain.events import DomainEvent, UserLogin
"""

from dsagrind.domain.events.auth_events import (
    PasswordChanged,
    PasswordResetCompleted,
    PasswordResetRequested,
    RefreshTokenRevoked,
    UserEmailVerified,
    UserLogin,
    UserLogout,
    UserRegistered,
)
from dsagrind.domain.events.base_event import DomainEvent

__all__ = [
    "DomainEvent",
    "PasswordChanged",
    "PasswordResetCompleted",
    "PasswordResetRequested",
    "RefreshTokenRevoked",
    "UserEmailVerified",
    "UserLogin",
    "UserLogout",
    "UserRegistered",
]
