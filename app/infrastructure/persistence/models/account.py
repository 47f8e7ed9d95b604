"""Account ORM model: tenant admins and their staff in one table."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Account(CuidMixin, TimestampMixin, Base):
    """Account model. Table: account.

    Email and username are globally unique and stored lower-cased. The
    partial unique index on role allows at most one admin without a parent
    (the super-tenant).
    """

    __tablename__ = "account"

    company_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    parent_account_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("account.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    is_approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    created_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    approved_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'recruiter', 'partner')", name="ck_account_role"
        ),
        Index(
            "uq_account_single_super_tenant",
            "role",
            unique=True,
            postgresql_where=text("parent_account_id IS NULL"),
        ),
        Index(
            "ix_account_pending",
            "created_at",
            postgresql_where=text("is_approved = false"),
        ),
    )
