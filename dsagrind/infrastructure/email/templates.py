"""Account email templates.

Plain-text bodies with the action link on its own line. Links are built
from the configured frontend URL so they open the SPA routes.
"""

from dataclasses import dataclass
from urllib.parse import urlencode


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailMessage:
    """Rendered email."""

    to_email: str
    subject: str
    body: str
    link: str | None = None


def verification_email(
    *, frontend_url: str, app_name: str, to_email: str, username: str, token: str
) -> EmailMessage:
    link = f"{frontend_url}/verify-email?{urlencode({'token': token})}"
    return EmailMessage(
        to_email=to_email,
        subject=f"Verify your {app_name} account",
        body=(
            f"Hi {username},\n\n"
            f"Thanks for signing up for {app_name}. Confirm your email address "
            "to start solving problems:\n\n"
            f"{link}\n\n"
            "If you did not create an account, you can ignore this email.\n"
        ),
        link=link,
    )


def welcome_email(*, app_name: str, to_email: str, username: str) -> EmailMessage:
    return EmailMessage(
        to_email=to_email,
        subject=f"Welcome to {app_name}",
        body=(
            f"Hi {username},\n\n"
            f"Your email is verified and your {app_name} account is ready. "
            "Happy grinding!\n"
        ),
    )


def password_reset_email(
    *,
    frontend_url: str,
    app_name: str,
    to_email: str,
    username: str,
    token: str,
    expires_hours: int,
) -> EmailMessage:
    link = f"{frontend_url}/reset-password?{urlencode({'token': token})}"
    return EmailMessage(
        to_email=to_email,
        subject=f"Reset your {app_name} password",
        body=(
            f"Hi {username},\n\n"
            "We received a request to reset your password. Use the link below "
            f"within {expires_hours} hour(s):\n\n"
            f"{link}\n\n"
            "If you did not request a reset, no action is needed.\n"
        ),
        link=link,
    )
