"""Email service implementations.

- StubEmailService: renders templates and writes them to the structured log
"""

from dsagrind.infrastructure.email.stub_email_service import StubEmailService
from dsagrind.infrastructure.email.templates import EmailMessage

__all__ = ["EmailMessage", "StubEmailService"]
