"""Normalized identity returned by an OAuth provider exchange.

Transient: never persisted. Used to find, link or create a User.
"""

from dataclasses import dataclass

from dsagrind.domain.enums import OAuthProvider


@dataclass(frozen=True, slots=True, kw_only=True)
class OAuthUser:
    """Provider-attested identity.

    Attributes:
        provider: Provider that attested the identity.
        provider_id: Provider's stable user id (stringified).
        email: Provider-attested email address.
        username: Provider handle (GitHub login), if any.
        first_name: Given name, if the provider exposes one.
        last_name: Family name, if the provider exposes one.
        avatar: Avatar URL, if any.
    """

    provider: OAuthProvider
    provider_id: str
    email: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None

    @property
    def base_username(self) -> str:
        """Username seed: the provider handle, else the email's local part."""
        if self.username:
            return self.username
        return self.email.split("@", 1)[0]
