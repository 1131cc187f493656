"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers

Token functions are pure: claims + secret + clock in, token (or claims) out.
The Flask app supplies secrets and lifetimes from its config; tests supply a
fixed `now`.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import ConfigurationError, TokenError

ACCESS = "access"
REFRESH = "refresh"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_password_hasher(time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4) -> PasswordHasher:
    """Create an argon2 hasher with the configured work factors."""
    try:
        return PasswordHasher(time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid password hashing parameters: {exc}") from exc


def hash_password(password: str, hasher: PasswordHasher) -> str:
    """Hash a plaintext password using Argon2
    """
    return hasher.hash(password)


def verify_password(password: str, password_hash: str, hasher: PasswordHasher) -> bool:
    """ Verify a plaintext password using argon2
    """
    if not password or not password_hash:
        return False
    try:
        return hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _encode(claims: Dict[str, Any], secret: str, expires: timedelta, algorithm: str, now: Optional[datetime]) -> str:
    if not secret:
        raise ConfigurationError("Token signing secret is not configured")
    now = now or utcnow()
    payload = dict(claims)
    payload.update(
        {
            "iat": int(now.timestamp()),
            "exp": int((now + expires).timestamp()),
            "jti": generate_jti(),
        }
    )
    return jwt.encode(payload, secret, algorithm=algorithm)


def issue_access_token(user, secret: str, expires: timedelta, algorithm: str = "HS256", now: Optional[datetime] = None) -> str:
    """Short-lived token carrying the identity's id, username and email."""
    claims = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "type": ACCESS,
    }
    return _encode(claims, secret, expires, algorithm, now)


def issue_refresh_token(user, secret: str, expires: timedelta, algorithm: str = "HS256", now: Optional[datetime] = None) -> str:
    """Long-lived token carrying only the identity's id."""
    return _encode({"sub": str(user.id), "type": REFRESH}, secret, expires, algorithm, now)


def decode_token(
    token: str,
    secret: str,
    expected_type: str = ACCESS,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenError on invalid signature, missing
    claims, wrong type or expiry. Expiry is checked against `now` rather than
    the wall clock so callers can pin time.
    """
    if not secret:
        raise ConfigurationError("Token signing secret is not configured")
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp", "iat", "type"]},
        )
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}") from exc

    if decoded.get("type") != expected_type:
        raise TokenError("Wrong token type")
    now = now or utcnow()
    try:
        expires_at = int(decoded["exp"])
    except (TypeError, ValueError):
        raise TokenError("Invalid token: malformed exp claim") from None
    if expires_at <= int(now.timestamp()):
        raise TokenError("Token expired")
    return decoded
