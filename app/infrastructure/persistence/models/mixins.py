"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, TimestampMixin, CreatedAtMixin, SingleUseTokenMixin.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Mixin for created_at only (server default, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SingleUseTokenMixin(CuidMixin, CreatedAtMixin):
    """Columns shared by hashed single-use tokens.

    Only the SHA-256 hex of the raw token is stored. ``used`` flips once;
    ``used_at`` records when.
    """

    @declared_attr
    def account_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("account.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def token_hash(cls) -> Mapped[str]:
        return mapped_column(String(64), unique=True, nullable=False, index=True)

    @declared_attr
    def expires_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), nullable=False)

    @declared_attr
    def used(cls) -> Mapped[bool]:
        return mapped_column(Boolean, nullable=False, server_default=text("false"))

    @declared_attr
    def used_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)
