"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.approval_token import ApprovalToken
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    SingleUseTokenMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)

__all__ = [
    "Account",
    "ApprovalToken",
    "PasswordResetToken",
    "CuidMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "SingleUseTokenMixin",
]
