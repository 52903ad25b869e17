"""Cryptographic utilities - invitation tokens, token hashing, and JWT verification."""

import secrets
from datetime import UTC, datetime, timedelta
from hashlib import sha256
from typing import Any

from jose import JWTError, jwt

from src.lynkskill.core.config import get_settings

# 32 random bytes = 256 bits of entropy
INVITATION_TOKEN_BYTES = 32


def generate_invitation_token() -> str:
    """Generate an unguessable invitation token (URL safe)."""
    return secrets.token_urlsafe(INVITATION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    email: str | None = None,
) -> str:
    """Create a signed token carrying ``sub`` (plus a ``type`` claim of "access").

    Only used by local tooling and tests; production tokens come from the
    identity provider and are verified by decode_token.
    """
    settings = get_settings()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=30))

    to_encode: dict[str, Any] = {
        "sub": subject,
        "exp": expire,
        "type": "access",
    }
    if email:
        to_encode["email"] = email
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT token. Returns None on any error."""
    settings = get_settings()
    try:
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
