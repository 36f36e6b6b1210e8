"""Stub email service (development/testing).

Renders every account email and logs its envelope instead of sending. Implements
EmailProtocol. The last 100 rendered messages are kept in ``outbox`` so a
developer (or a test) can pick up verification and reset links.
"""

from collections import deque

from dsagrind.domain.protocols import LoggerProtocol
from dsagrind.infrastructure.email.templates import (
    EmailMessage,
    password_reset_email,
    verification_email,
    welcome_email,
)


class StubEmailService:
    """Logs rendered emails.

    Args:
        logger: Structured logger.
        frontend_url: Base URL for action links.
        app_name: Product name used in subjects.
        reset_expire_hours: Reset link lifetime shown in the email.
    """

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        frontend_url: str,
        app_name: str = "DSAGrind",
        reset_expire_hours: int = 1,
    ) -> None:
        self._logger = logger
        self._frontend_url = frontend_url.rstrip("/")
        self._app_name = app_name
        self._reset_expire_hours = reset_expire_hours
        self.outbox: deque[EmailMessage] = deque(maxlen=100)

    async def send_email_verification(
        self, to_email: str, username: str, token: str
    ) -> None:
        self._deliver(
            verification_email(
                frontend_url=self._frontend_url,
                app_name=self._app_name,
                to_email=to_email,
                username=username,
                token=token,
            )
        )

    async def send_welcome_email(self, to_email: str, username: str) -> None:
        self._deliver(
            welcome_email(
                app_name=self._app_name, to_email=to_email, username=username
            )
        )

    async def send_password_reset(
        self, to_email: str, username: str, token: str
    ) -> None:
        self._deliver(
            password_reset_email(
                frontend_url=self._frontend_url,
                app_name=self._app_name,
                to_email=to_email,
                username=username,
                token=token,
                expires_hours=self._reset_expire_hours,
            )
        )

    def _deliver(self, message: EmailMessage) -> None:
        self.outbox.append(message)
        self._logger.info("email_stub_sent", to_email=message.to_email, subject=message.subject)
