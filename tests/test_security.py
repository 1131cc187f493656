"""Tests for :mod:`utils.security`."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from utils.exceptions import ConfigurationError, TokenError
from utils.security import (
    ACCESS,
    REFRESH,
    build_password_hasher,
    decode_token,
    hash_password,
    issue_access_token,
    issue_refresh_token,
    verify_password,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
USER = SimpleNamespace(id="u-1", username="alice", email="a@x.com", full_name="Alice Example")


@pytest.fixture(scope="module")
def hasher():
    return build_password_hasher(time_cost=1, memory_cost=1024, parallelism=1)


class TestCredentialVerifier:
    def test_matching_password(self, hasher):
        h = hash_password("s3cret-pass", hasher)
        assert h != "s3cret-pass"
        assert verify_password("s3cret-pass", h, hasher)

    def test_wrong_password(self, hasher):
        h = hash_password("s3cret-pass", hasher)
        assert not verify_password("other-pass", h, hasher)

    def test_salted(self, hasher):
        assert hash_password("same", hasher) != hash_password("same", hasher)

    def test_garbage_hash_is_a_mismatch(self, hasher):
        assert not verify_password("s3cret-pass", "not-a-hash", hasher)

    def test_missing_inputs(self, hasher):
        h = hash_password("s3cret-pass", hasher)
        assert not verify_password(None, h, hasher)
        assert not verify_password("s3cret-pass", None, hasher)

    def test_bad_cost_parameters(self):
        with pytest.raises(ConfigurationError):
            build_password_hasher(time_cost="three")


class TestTokenIssuer:
    def test_access_token_claims(self):
        token = issue_access_token(USER, "a-secret", timedelta(minutes=15), now=NOW)
        claims = decode_token(token, "a-secret", ACCESS, now=NOW + timedelta(minutes=1))
        assert claims["sub"] == "u-1"
        assert claims["username"] == "alice"
        assert claims["email"] == "a@x.com"
        assert claims["exp"] - claims["iat"] == 15 * 60

    def test_refresh_token_carries_only_identity(self):
        token = issue_refresh_token(USER, "r-secret", timedelta(days=10), now=NOW)
        claims = decode_token(token, "r-secret", REFRESH, now=NOW)
        assert claims["sub"] == "u-1"
        assert "username" not in claims
        assert "email" not in claims

    def test_tokens_issued_together_differ(self):
        a = issue_refresh_token(USER, "r-secret", timedelta(days=10), now=NOW)
        b = issue_refresh_token(USER, "r-secret", timedelta(days=10), now=NOW)
        assert a != b

    def test_expired(self):
        token = issue_refresh_token(USER, "r-secret", timedelta(days=10), now=NOW)
        with pytest.raises(TokenError):
            decode_token(token, "r-secret", REFRESH, now=NOW + timedelta(days=10))

    def test_wrong_secret(self):
        token = issue_access_token(USER, "a-secret", timedelta(minutes=15), now=NOW)
        with pytest.raises(TokenError):
            decode_token(token, "nottherightsecret", ACCESS, now=NOW)

    def test_wrong_type(self):
        token = issue_access_token(USER, "shared", timedelta(minutes=15), now=NOW)
        with pytest.raises(TokenError):
            decode_token(token, "shared", REFRESH, now=NOW)

    def test_missing_claims(self):
        token = jwt.encode({"sub": "u-1", "type": REFRESH}, "r-secret", algorithm="HS256")
        with pytest.raises(TokenError):
            decode_token(token, "r-secret", REFRESH, now=NOW)

    def test_not_a_token(self):
        with pytest.raises(TokenError):
            decode_token("definitelynotatoken", "r-secret", REFRESH, now=NOW)

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError):
            issue_access_token(USER, "", timedelta(minutes=15), now=NOW)
        with pytest.raises(ConfigurationError):
            issue_refresh_token(USER, None, timedelta(days=1), now=NOW)
