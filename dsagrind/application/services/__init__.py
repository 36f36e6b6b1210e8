"""Application services shared by several handlers."""

from dsagrind.application.services.email_delivery import deliver_email
from dsagrind.application.services.session_issuer import SessionIssuer
from dsagrind.application.services.user_cache import UserCache

__all__ = ["SessionIssuer", "UserCache", "deliver_email"]
