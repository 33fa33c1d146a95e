"""
Password hashing and JWT access/refresh tokens.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from eventspotter.core.config import settings
from eventspotter.cache.redis_client import cache

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> None:
    """
    Validate password strength.

    Raises:
        ValueError: If password doesn't meet the minimum requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if not password.strip():
        raise ValueError("Password cannot be blank")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; must include "sub" (the user id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    expire = _utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: Dict) -> str:
    """Create a JWT refresh token with longer expiration."""
    to_encode = data.copy()
    expire = _utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict:
    """
    Decode and validate a JWT token.

    Raises:
        ValueError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ValueError("Token has expired")
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}")

    if "sub" not in payload:
        raise ValueError("Invalid token payload: missing 'sub' field")
    return payload


async def revoke_token(token: str, expiry: Optional[int] = None) -> bool:
    """
    Add token to revocation list in Redis.

    Args:
        token: Token to revoke
        expiry: Optional TTL in seconds (if not provided, calculated from token exp)

    Returns:
        True if the token was recorded as revoked
    """
    if expiry:
        return await cache.set(f"revoked_token:{token}", True, expire=expiry)

    try:
        payload = decode_token(token)
    except ValueError:
        return False

    exp = payload.get("exp")
    if not exp:
        return False
    ttl = int(exp) - int(_utcnow().timestamp())
    if ttl <= 0:
        return False
    return await cache.set(f"revoked_token:{token}", True, expire=ttl)


async def is_token_revoked(token: str) -> bool:
    """Check if token is in revocation list."""
    return await cache.exists(f"revoked_token:{token}")
