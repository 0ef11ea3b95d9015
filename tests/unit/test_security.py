"""Unit tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from survey_service.config import get_settings
from survey_service.errors import AuthError
from survey_service.services.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("secret123", "not-a-bcrypt-hash")

    def test_long_passwords_truncated_consistently(self):
        long_password = "x" * 100
        hashed = hash_password(long_password)
        assert verify_password(long_password, hashed)


class TestAccessTokens:
    """Tests for token issue and verification."""

    def test_round_trip(self):
        token = create_access_token(42)
        assert decode_access_token(token) == 42

    def test_expired(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.message == "Invalid token"
        assert exc_info.value.status_code == 401

    def test_bad_signature(self):
        settings = get_settings()
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "1", "exp": now + timedelta(minutes=5), "type": "access"},
            "some-other-secret",
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthError, match="Invalid token"):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(AuthError, match="Invalid token"):
            decode_access_token("not.a.token")

    def test_wrong_token_type(self):
        settings = get_settings()
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "1", "exp": now + timedelta(minutes=5), "type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthError, match="Invalid token"):
            decode_access_token(token)
