"""Security: session credentials, password hashing, and single-use tokens."""

from app.infrastructure.security.jwt import (
    create_access_token,
    create_session_credential,
    verify_session_credential,
    verify_token,
)
from app.infrastructure.security.password import get_password_hash, verify_password
from app.infrastructure.security.tokens import (
    generate_token,
    hash_token,
)

__all__ = [
    "create_access_token",
    "create_session_credential",
    "generate_token",
    "get_password_hash",
    "hash_token",
    "verify_password",
    "verify_session_credential",
    "verify_token",
]
