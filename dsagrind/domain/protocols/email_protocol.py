"""EmailProtocol - port for transactional email.

Infrastructure provides the concrete sender (StubEmailService logs the
rendered message). Implementations raise on delivery failure; the session
handlers log and continue so a mail outage never blocks a credential change.
"""

from typing import Protocol


class EmailProtocol(Protocol):
    """Templated account emails."""

    async def send_email_verification(
        self, to_email: str, username: str, token: str
    ) -> None:
        """Send the verification link built from ``token``."""
        ...

    async def send_welcome_email(self, to_email: str, username: str) -> None: ...

    async def send_password_reset(
        self, to_email: str, username: str, token: str
    ) -> None:
        """Send the reset link built from ``token``."""
        ...
