"""
Unit tests for the security module.
Tests password validation, hashing, JWT token creation/validation, and token revocation.
"""
import pytest
from datetime import timedelta
from jose import jwt

from eventspotter.core.security import (
    validate_password,
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
    revoke_token,
    is_token_revoked,
)
from eventspotter.core.config import settings


@pytest.mark.unit
class TestPasswordValidation:
    """Test password validation functionality."""

    def test_valid_password(self):
        for password in ["Password123!", "long enough", "12345678"]:
            validate_password(password)  # Should not raise

    def test_password_too_short(self):
        with pytest.raises(ValueError, match="at least 8 characters"):
            validate_password("Short1!")

    def test_blank_password(self):
        with pytest.raises(ValueError, match="blank"):
            validate_password("        ")


@pytest.mark.unit
class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password(self):
        hashed = hash_password("Password123!")

        assert hashed != "Password123!"
        assert hashed.startswith("$2b$")

    def test_verify_password_correct(self):
        hashed = hash_password("Password123!")

        assert verify_password("Password123!", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("Password123!")

        assert verify_password("Wrong123!", hashed) is False


@pytest.mark.unit
class TestJWTTokens:
    """Test JWT token creation and decoding."""

    def test_create_access_token(self):
        token = create_access_token({"sub": "user123", "username": "someone"})

        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "user123"
        assert payload["username"] == "someone"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_create_refresh_token(self):
        token = create_refresh_token({"sub": "user123"})

        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["type"] == "refresh"

    def test_refresh_outlives_access(self):
        access = decode_token(create_access_token({"sub": "u"}))
        refresh = decode_token(create_refresh_token({"sub": "u"}))

        assert refresh["exp"] > access["exp"]

    def test_decode_invalid_token(self):
        with pytest.raises(ValueError, match="Invalid token"):
            decode_token("invalid.token.here")

    def test_decode_expired_token(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(ValueError, match="Token has expired"):
            decode_token(token)

    def test_decode_token_signed_with_other_key(self):
        token = jwt.encode({"sub": "user123"}, "not-the-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(ValueError, match="Invalid token"):
            decode_token(token)

    def test_decode_token_missing_sub(self):
        token = jwt.encode({"type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        with pytest.raises(ValueError, match="Invalid token payload"):
            decode_token(token)


@pytest.mark.unit
@pytest.mark.asyncio
class TestTokenRevocation:
    """Token revocation against the cache; tests run with caching disabled."""

    async def test_is_token_revoked_not_revoked(self):
        assert await is_token_revoked("non_revoked_token") is False

    async def test_revoke_without_cache_is_a_noop(self):
        token = create_access_token({"sub": "user123"})

        assert await revoke_token(token) is False
        assert await is_token_revoked(token) is False

    async def test_revoke_invalid_token(self):
        assert await revoke_token("garbage") is False
