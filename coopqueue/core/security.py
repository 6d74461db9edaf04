"""Password hashing and JWT creation/verification for authentication."""

import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from coopqueue.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 20
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 100


def _keyed_hash(salt: bytes, plain_password: str) -> bytes:
    return hmac.new(salt, plain_password.encode("utf-8"), hashlib.sha512).digest()


def hash_password(plain_password: str) -> tuple[bytes, bytes]:
    """
    Hash a plain-text password for storage; returns (hash, salt).

    The salt is a fresh random HMAC-SHA512 key, so identical passwords never
    share a salt or a hash.
    """
    salt = secrets.token_bytes(settings.PASSWORD_SALT_BYTES)
    return _keyed_hash(salt, plain_password), salt


def verify_password(plain_password: str, stored_hash: bytes, stored_salt: bytes) -> bool:
    """Verify a plain password against a stored hash and salt in constant time."""
    if not stored_hash or not stored_salt:
        return False
    return hmac.compare_digest(_keyed_hash(stored_salt, plain_password), stored_hash)


def create_access_token(sub: int, name: str, role: str) -> str:
    """Create a JWT access token with sub (account id), name, role, iat and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "name": name,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, name, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp", "iat"]},
    )
