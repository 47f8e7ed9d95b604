"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.account_repo import AccountRepository
from app.infrastructure.persistence.repositories.approval_token_repo import (
    ApprovalTokenStore,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.password_reset_token_repo import (
    PasswordResetTokenStore,
)

__all__ = [
    "AccountRepository",
    "ApprovalTokenStore",
    "BaseRepository",
    "PasswordResetTokenStore",
]
