"""Domain protocols (ports).

Protocols use structural typing: adapters need not inherit from them.
"""

from dsagrind.domain.protocols.cache_protocol import CacheProtocol
from dsagrind.domain.protocols.email_protocol import EmailProtocol
from dsagrind.domain.protocols.event_bus_protocol import (
    EventBusProtocol,
    EventHandler,
)
from dsagrind.domain.protocols.event_publisher_protocol import EventPublisherProtocol
from dsagrind.domain.protocols.logger_protocol import LoggerProtocol
from dsagrind.domain.protocols.oauth_protocol import OAuthClientProtocol
from dsagrind.domain.protocols.password_hashing_protocol import (
    PasswordHashingProtocol,
)
from dsagrind.domain.protocols.rate_limit_protocol import (
    RateLimitProtocol,
    RateLimitResult,
)
from dsagrind.domain.protocols.token_generation_protocol import (
    SecureTokenProtocol,
    TokenGenerationProtocol,
)
from dsagrind.domain.protocols.user_repository import UserRepository

__all__ = [
    "CacheProtocol",
    "EmailProtocol",
    "EventBusProtocol",
    "EventHandler",
    "EventPublisherProtocol",
    "LoggerProtocol",
    "OAuthClientProtocol",
    "PasswordHashingProtocol",
    "RateLimitProtocol",
    "RateLimitResult",
    "SecureTokenProtocol",
    "TokenGenerationProtocol",
    "UserRepository",
]
