"""Unit tests for the User and RefreshToken entities.

Tests cover:
- Refresh token activity (revoked, expired)
- Pruning on add (active only, newest first, capped)
- Revoke-all counting
- Email verification and reset token consumption
- OAuth linking (sets provider id, trusts the email)
- Profile sub-document round trip with defaults

Architecture:
- Pure domain tests, no mocks
- freezegun drives expiry
"""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from dsagrind.domain.entities import UserProfile
from dsagrind.domain.enums import OAuthProvider
from tests.factories import create_refresh_token, create_user


@pytest.mark.unit
class TestRefreshToken:
    def test_new_token_is_active(self):
        token = create_refresh_token()

        assert token.is_active is True
        assert token.is_revoked is False
        assert token.is_expired is False

    def test_revoke_records_ip_and_successor(self):
        token = create_refresh_token()

        token.revoke("198.51.100.1", replaced_by_token="next")

        assert token.is_revoked is True
        assert token.is_active is False
        assert token.revoked_by_ip == "198.51.100.1"
        assert token.replaced_by_token == "next"

    def test_token_expires_at_expiry_instant(self):
        with freeze_time("2026-01-01 12:00:00"):
            token = create_refresh_token(
                expires=datetime(2026, 1, 8, 12, 0, tzinfo=UTC)
            )

        with freeze_time("2026-01-08 11:59:59"):
            assert token.is_active is True
        with freeze_time("2026-01-08 12:00:00"):
            assert token.is_expired is True
            assert token.is_active is False


@pytest.mark.unit
class TestRefreshTokenPruning:
    def test_keeps_five_newest_active_tokens(self):
        # Arrange
        user = create_user()
        base = datetime.now(UTC)
        for i in range(5):
            user.add_refresh_token(
                create_refresh_token(token=f"t{i}", created=base + timedelta(seconds=i)),
                max_active=5,
            )

        # Act
        user.add_refresh_token(
            create_refresh_token(token="t5", created=base + timedelta(seconds=5)),
            max_active=5,
        )

        # Assert
        assert [t.token for t in user.refresh_tokens] == ["t5", "t4", "t3", "t2", "t1"]
        assert user.pruned_refresh_tokens == {"t0"}

    def test_drops_revoked_and_expired_tokens(self):
        user = create_user()
        revoked = create_refresh_token(token="revoked")
        revoked.revoke("203.0.113.7")
        expired = create_refresh_token(
            token="expired", expires=datetime.now(UTC) - timedelta(seconds=1)
        )
        user.refresh_tokens = [revoked, expired]

        user.add_refresh_token(create_refresh_token(token="fresh"), max_active=5)

        assert [t.token for t in user.refresh_tokens] == ["fresh"]
        assert user.pruned_refresh_tokens == {"revoked", "expired"}

    def test_find_refresh_token_returns_inactive_tokens_too(self):
        user = create_user()
        token = create_refresh_token(token="old")
        token.revoke("203.0.113.7")
        user.refresh_tokens = [token]

        assert user.find_refresh_token("old") is token
        assert user.find_refresh_token("missing") is None
        assert user.active_refresh_tokens == []


@pytest.mark.unit
class TestUserCredentials:
    def test_revoke_all_counts_only_active_tokens(self):
        user = create_user()
        already = create_refresh_token(token="a")
        already.revoke("203.0.113.7")
        user.refresh_tokens = [already, create_refresh_token(token="b"), create_refresh_token(token="c")]

        revoked = user.revoke_all_refresh_tokens("198.51.100.1")

        assert revoked == 2
        assert user.active_refresh_tokens == []

    def test_verify_email_consumes_token(self):
        user = create_user(is_email_verified=False, email_verification_token="abc")

        user.verify_email()

        assert user.is_email_verified is True
        assert user.email_verification_token is None

    def test_reset_token_valid_until_expiry(self):
        user = create_user()
        with freeze_time("2026-03-01 10:00:00"):
            user.request_password_reset("reset", datetime(2026, 3, 1, 11, 0, tzinfo=UTC))
            assert user.has_valid_reset_token("reset") is True
            assert user.has_valid_reset_token("other") is False

        with freeze_time("2026-03-01 11:00:01"):
            assert user.has_valid_reset_token("reset") is False

    def test_set_password_clears_reset_token(self):
        user = create_user()
        user.request_password_reset("reset", datetime.now(UTC) + timedelta(hours=1))

        user.set_password("new-hash")

        assert user.password_hash == "new-hash"
        assert user.reset_password_token is None
        assert user.reset_password_expires is None

    def test_oauth_only_user_has_no_password(self):
        assert create_user(password_hash=None).has_password is False


@pytest.mark.unit
class TestOAuthLinking:
    @pytest.mark.parametrize(
        ("provider", "attribute"),
        [(OAuthProvider.GOOGLE, "google_id"), (OAuthProvider.GITHUB, "github_id")],
    )
    def test_link_sets_provider_id_and_verifies_email(self, provider, attribute):
        user = create_user(is_email_verified=False)

        user.link_oauth(provider, "ext-1")

        assert getattr(user, attribute) == "ext-1"
        assert user.oauth_id(provider) == "ext-1"
        assert user.is_email_verified is True


@pytest.mark.unit
class TestUserProfile:
    def test_defaults_fill_missing_keys(self):
        profile = UserProfile.from_dict({"bio": "hi", "preferences": {"theme": "light"}})

        data = profile.to_dict()

        assert data["bio"] == "hi"
        assert data["preferences"]["theme"] == "light"
        assert data["preferences"]["language"] == "en"
        assert data["preferences"]["notifications"]["email"] is True

    def test_none_gives_default_profile(self):
        assert UserProfile.from_dict(None) == UserProfile()
