"""Third-party identity providers.

A closed set: every provider has a settings entry and an exchange strategy
in the OAuth client. Unknown provider names never reach the domain; they are
rejected by ``OAuthProvider.parse``.
"""

from enum import Enum


class OAuthProvider(str, Enum):
    """Supported OAuth providers."""

    GOOGLE = "google"
    GITHUB = "github"

    @classmethod
    def values(cls) -> list[str]:
        """Get all provider values as strings."""
        return [provider.value for provider in cls]

    @classmethod
    def parse(cls, value: str) -> "OAuthProvider | None":
        """Resolve a provider name case-insensitively.

        Args:
            value: Provider name from a URL path or cached state.

        Returns:
            Matching provider, or None when unsupported.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
