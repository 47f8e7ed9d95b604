"""Opaque single-use tokens (approval and password-reset links).

Raw tokens go out by email only; storage keeps the SHA-256 hex digest.
"""

import hashlib
import secrets


def generate_token() -> str:
    """Return a new URL-safe token with 256 bits of entropy."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest stored in place of the raw token."""
    return hashlib.sha256(token.encode()).hexdigest()
