"""Single-use token for POST /auth/reset-password."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SingleUseTokenMixin


class PasswordResetToken(SingleUseTokenMixin, Base):
    """Table: password_reset_token. Redeemable only together with the matching email."""

    __tablename__ = "password_reset_token"

    email: Mapped[str] = mapped_column(String, nullable=False, index=True)
