"""
Unit tests for core.security module.
Tests password hashing, JWT token creation/validation.
"""
import pytest
import datetime as dt
import jwt
from portal.core.security import (
    hash_password,
    verify_password,
    hash_password_async,
    verify_password_async,
    create_access_token,
    decode_access_token,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_SECRET,
    ROLE_ADMIN,
    ROLE_USER,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)

    def test_hash_password_is_bcrypt(self):
        """Hashed password should be a bcrypt string, never the plain text."""
        password = "TestPassword123"
        hashed = hash_password(password)
        assert isinstance(hashed, str)
        assert hashed.startswith("$2")
        assert hashed != password

    def test_verify_password_correct_password(self):
        """verify_password should return True for correct password."""
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        """verify_password should return False for incorrect password."""
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False

    @pytest.mark.asyncio
    async def test_async_helpers_match_sync_behaviour(self):
        """Threadpool wrappers should hash and verify like the sync versions."""
        hashed = await hash_password_async("AsyncPass!1")
        assert await verify_password_async("AsyncPass!1", hashed) is True
        assert await verify_password_async("nope", hashed) is False


class TestJWTTokens:
    """Tests for JWT token creation and validation."""

    def test_token_payload_carries_id_email_and_type(self):
        """Token should contain subject id, email and role."""
        token = create_access_token("user-123", "a@x.com", ROLE_USER)
        payload = decode_access_token(token)
        assert payload["id"] == "user-123"
        assert payload["email"] == "a@x.com"
        assert payload["type"] == "user"
        assert "iat" in payload
        assert "exp" in payload

    def test_admin_and_user_tokens_differ(self):
        """Same subject with different roles should get different tokens."""
        token_user = create_access_token("same", "s@x.com", ROLE_USER)
        token_admin = create_access_token("same", "s@x.com", ROLE_ADMIN)
        assert token_user != token_admin
        assert decode_access_token(token_admin)["type"] == "admin"

    def test_token_expiration_time(self):
        """Token lifetime should match the configured 24 hours."""
        payload = decode_access_token(create_access_token("u", "u@x.com", ROLE_USER))
        diff_minutes = (payload["exp"] - payload["iat"]) / 60
        assert ACCESS_TOKEN_EXPIRE_MINUTES == 1440
        assert abs(diff_minutes - ACCESS_TOKEN_EXPIRE_MINUTES) < 1
        assert payload["exp"] > dt.datetime.now(dt.timezone.utc).timestamp()

    def test_decode_access_token_invalid_token(self):
        """decode_access_token should raise for a malformed token."""
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token("invalid.token.here")

    def test_decode_access_token_wrong_secret(self):
        """A token signed with another secret must be rejected."""
        forged = jwt.encode({"id": "x", "email": "x@x.com", "type": "admin"}, "wrong-secret", algorithm="HS256")
        with pytest.raises(jwt.InvalidSignatureError):
            decode_access_token(forged)

    def test_decode_access_token_expired(self):
        """Expired tokens raise ExpiredSignatureError."""
        past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(minutes=5)
        expired = jwt.encode(
            {"id": "x", "email": "x@x.com", "type": "user", "iat": past, "exp": past},
            JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(expired)
