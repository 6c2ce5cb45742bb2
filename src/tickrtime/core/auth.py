"""Password hashing and access-token helpers.

Passwords are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>``.
Access tokens are HS256 JWTs carrying ``sub`` (user id), ``email`` and
``email_verified``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from tickrtime.core.exceptions import AuthError

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 100_000
JWT_ALGORITHM = "HS256"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded access-token payload."""

    user_id: str
    email: str
    email_verified: bool


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        if algorithm != PBKDF2_ALGORITHM:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


def create_access_token(
    user_id: str,
    email: str,
    email_verified: bool,
    secret: str,
    expires_in: timedelta = timedelta(days=7),
) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "email_verified": email_verified,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    token: str = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    return token


def decode_access_token(token: str, secret: str) -> TokenClaims:
    """Decode and verify an access token.

    Raises:
        AuthError: on bad signature, expiry or missing claims
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        raise AuthError("Invalid or expired token") from e

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise AuthError("Invalid or expired token")
    return TokenClaims(
        user_id=str(user_id),
        email=str(email),
        email_verified=bool(payload.get("email_verified", False)),
    )


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_password(password: str) -> str | None:
    """Return a human-readable problem with the password, or None if it is acceptable."""
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    return None
