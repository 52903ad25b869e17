"""Security utilities - token hashing and identity token verification.

Re-exports all security-related functions for convenience.
"""

from src.lynkskill.core.security.crypto import (
    create_access_token,
    decode_token,
    generate_invitation_token,
    hash_token,
)

__all__ = [
    "create_access_token",
    "decode_token",
    "generate_invitation_token",
    "hash_token",
]
