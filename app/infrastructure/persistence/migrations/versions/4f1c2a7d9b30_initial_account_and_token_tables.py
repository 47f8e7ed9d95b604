"""initial_account_and_token_tables

Revision ID: 4f1c2a7d9b30
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a7d9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _token_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - account, approval_token, password_reset_token."""

    op.create_table(
        "account",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("parent_account_id", sa.String(), nullable=True),
        sa.Column(
            "is_approved", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["parent_account_id"], ["account.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["created_by"], ["account.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["approved_by"], ["account.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
        sa.CheckConstraint(
            "role IN ('admin', 'recruiter', 'partner')", name="ck_account_role"
        ),
    )
    op.create_index("ix_account_parent_account_id", "account", ["parent_account_id"])
    # At most one admin without a parent: the super-tenant.
    op.create_index(
        "uq_account_single_super_tenant",
        "account",
        ["role"],
        unique=True,
        postgresql_where=sa.text("parent_account_id IS NULL"),
    )
    op.create_index(
        "ix_account_pending",
        "account",
        ["created_at"],
        postgresql_where=sa.text("is_approved = false"),
    )

    op.create_table(
        "approval_token",
        *_token_columns(),
        sa.Column("target_email", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_approval_token_account_id", "approval_token", ["account_id"])
    op.create_index(
        "ix_approval_token_token_hash", "approval_token", ["token_hash"], unique=True
    )

    op.create_table(
        "password_reset_token",
        *_token_columns(),
        sa.Column("email", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_password_reset_token_account_id", "password_reset_token", ["account_id"]
    )
    op.create_index(
        "ix_password_reset_token_token_hash",
        "password_reset_token",
        ["token_hash"],
        unique=True,
    )
    op.create_index(
        "ix_password_reset_token_email", "password_reset_token", ["email"]
    )


def downgrade() -> None:
    """Downgrade schema - drop all three tables."""
    op.drop_index("ix_password_reset_token_email", table_name="password_reset_token")
    op.drop_index("ix_password_reset_token_token_hash", table_name="password_reset_token")
    op.drop_index("ix_password_reset_token_account_id", table_name="password_reset_token")
    op.drop_table("password_reset_token")
    op.drop_index("ix_approval_token_token_hash", table_name="approval_token")
    op.drop_index("ix_approval_token_account_id", table_name="approval_token")
    op.drop_table("approval_token")
    op.drop_index("ix_account_pending", table_name="account")
    op.drop_index("uq_account_single_super_tenant", table_name="account")
    op.drop_index("ix_account_parent_account_id", table_name="account")
    op.drop_table("account")
