"""
Session token issue/verify behaviour.
"""

import jwt
import pytest

from auth import security


class TestSessionTokens:

    def test_roundtrip_returns_same_identity(self):
        token = security.issue_session_token("alice@x.com")
        result = security.verify_session_token(token)

        assert result.ok
        assert result.error is None
        assert result.identity.email == "alice@x.com"

    def test_validity_window_is_three_days(self):
        token = security.issue_session_token("alice@x.com", now=1_700_000_000)
        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload["iat"] == 1_700_000_000
        assert payload["exp"] - payload["iat"] == 3 * 24 * 60 * 60

    def test_ttl_is_configurable(self, monkeypatch):
        monkeypatch.setenv("SESSION_TTL_DAYS", "1")
        token = security.issue_session_token("alice@x.com", now=1_700_000_000)
        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload["exp"] - payload["iat"] == 24 * 60 * 60

    def test_expired_token_is_rejected(self):
        four_days_ago = security.now_epoch_s() - 4 * 24 * 60 * 60
        token = security.issue_session_token("alice@x.com", now=four_days_ago)

        result = security.verify_session_token(token)

        assert not result.ok
        assert result.identity is None
        assert "expired" in result.error.lower()

    def test_tampered_signature_is_rejected(self):
        header, _, signature = security.issue_session_token("alice@x.com").split(".")
        _, other_payload, _ = security.issue_session_token("mallory@x.com").split(".")
        tampered = ".".join([header, other_payload, signature])

        assert not security.verify_session_token(tampered).ok

    def test_token_signed_with_other_secret_is_rejected(self):
        now = security.now_epoch_s()
        forged = jwt.encode(
            {"email": "alice@x.com", "type": "session", "iat": now, "exp": now + 60},
            "some-other-secret",
            algorithm="HS256",
        )

        assert not security.verify_session_token(forged).ok

    def test_non_session_token_is_rejected(self):
        now = security.now_epoch_s()
        token = jwt.encode(
            {"email": "alice@x.com", "type": "access", "iat": now, "exp": now + 60},
            "test-secret-key-for-testing-only",
            algorithm="HS256",
        )

        result = security.verify_session_token(token)

        assert not result.ok
        assert "session" in result.error

    @pytest.mark.parametrize("token", [None, "", "   ", "not-a-jwt", "a.b.c"])
    def test_missing_or_malformed_token_is_rejected(self, token):
        assert not security.verify_session_token(token).ok

    def test_issue_requires_email(self):
        with pytest.raises(security.AuthSecurityError):
            security.issue_session_token("  ")
